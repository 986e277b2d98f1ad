"""Tests for container wiring."""

from nutrition_engine.containers import build_container


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)
    assert container.grading_service is not None
    assert container.insights_service.min_days_with_data == 5
    assert container.suggestions_service.sample_size == 100
    assert container.check_in_service is not None

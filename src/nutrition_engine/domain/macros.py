"""Macronutrient math shared by the calculators."""

import math
from dataclasses import dataclass

PROTEIN_KCAL_PER_G = 4
CARBS_KCAL_PER_G = 4
FAT_KCAL_PER_G = 9


@dataclass(frozen=True)
class MacroShares:
    """Calorie share of each macro, in percent."""

    protein: float
    carbs: float
    fat: float


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with halves rounded up."""
    return math.floor(value + 0.5)


def macro_calories(protein_g: float, carbs_g: float, fat_g: float) -> float:
    """Return the calories contributed by the given macro grams."""
    return (
        protein_g * PROTEIN_KCAL_PER_G
        + carbs_g * CARBS_KCAL_PER_G
        + fat_g * FAT_KCAL_PER_G
    )


def macro_shares(protein_g: float, carbs_g: float, fat_g: float) -> MacroShares:
    """Return each macro's share of macro calories; zeros when there are none."""
    total = macro_calories(protein_g, carbs_g, fat_g)
    if total <= 0:
        return MacroShares(protein=0.0, carbs=0.0, fat=0.0)
    return MacroShares(
        protein=protein_g * PROTEIN_KCAL_PER_G / total * 100,
        carbs=carbs_g * CARBS_KCAL_PER_G / total * 100,
        fat=fat_g * FAT_KCAL_PER_G / total * 100,
    )

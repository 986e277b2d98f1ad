"""Food keyword lists used to classify parsed meal items."""

VEGETABLES = (
    "broccoli", "spinach", "kale", "lettuce", "carrots", "carrot", "tomato",
    "cucumber", "bell pepper", "pepper", "zucchini", "asparagus", "cauliflower",
    "brussels sprouts", "cabbage", "celery", "eggplant", "green beans",
    "mushrooms", "mushroom", "onion", "peas", "radish", "squash", "sweet potato",
    "potato", "arugula", "bok choy", "collard greens", "artichoke", "beets",
    "chard", "fennel", "leeks", "parsnip", "turnip", "watercress", "salad",
    "greens", "vegetables", "veggie",
    "scallion", "spring onion", "green onion", "bean sprouts", "sprouts",
    "bamboo shoots", "water chestnuts", "snow peas", "chinese cabbage",
    "napa cabbage", "daikon", "lotus root", "seaweed", "nori", "kombu",
)  # fmt: skip

FRUITS = (
    "apple", "banana", "orange", "strawberry", "blueberry", "raspberry",
    "grape", "mango", "pineapple", "watermelon", "cantaloupe", "honeydew",
    "peach", "pear", "plum", "cherry", "kiwi", "papaya", "avocado",
    "blackberry", "cranberry", "pomegranate", "grapefruit", "lemon", "lime",
    "fruit",
)  # fmt: skip

FOLATE_RICH = (
    "spinach", "kale", "broccoli", "brussels sprouts", "asparagus", "lentils",
    "chickpeas", "beans", "orange", "avocado", "fortified cereal",
    "leafy greens", "collard greens", "turnip greens", "lettuce", "beets",
    "edamame",
)  # fmt: skip

IRON_RICH = (
    "red meat", "beef", "lamb", "pork", "chicken", "turkey", "liver",
    "spinach", "lentils", "beans", "tofu", "quinoa", "fortified cereal",
    "pumpkin seeds", "cashews", "chickpeas", "edamame",
)  # fmt: skip

CALCIUM_RICH = (
    "milk", "yogurt", "cheese", "cottage cheese", "tofu", "salmon", "sardines",
    "kale", "broccoli", "bok choy", "almonds", "fortified milk",
    "fortified juice",
)  # fmt: skip

DHA_OMEGA3 = (
    "salmon", "sardines", "mackerel", "herring", "trout", "chia seeds",
    "flax seeds", "walnuts", "eggs", "fortified eggs",
)  # fmt: skip

PREGNANCY_AVOID = (
    "sushi", "raw fish", "tuna", "swordfish", "shark", "king mackerel",
    "deli meat", "hot dog", "lunch meat", "unpasteurized", "soft cheese",
    "brie", "feta", "blue cheese", "queso fresco", "raw egg", "runny egg",
    "alcohol", "beer", "wine", "liquor", "energy drink", "high caffeine",
)  # fmt: skip


def matches_any(food: str, keywords: tuple[str, ...]) -> bool:
    """Return True when any keyword is a case-insensitive substring of food."""
    lowered = food.lower()
    return any(keyword in lowered for keyword in keywords)


def is_vegetable(food: str) -> bool:
    """Return True for foods that look like vegetables."""
    return matches_any(food, VEGETABLES)


def is_fruit(food: str) -> bool:
    """Return True for foods that look like fruit."""
    return matches_any(food, FRUITS)

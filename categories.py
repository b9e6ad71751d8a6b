from typing import Optional

# Report breakdowns list categories in exactly this order.
CATEGORIES: tuple[str, ...] = (
    "food",
    "health",
    "housing",
    "sports",
    "education",
)


def normalize_category(value: Optional[str]) -> str:
    return (value or "").strip().lower()


def is_known_category(value: str, categories: tuple[str, ...] = CATEGORIES) -> bool:
    return value in categories

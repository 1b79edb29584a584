"""Food-bank domain: models, local name matching, item mapping and nutrition totals."""

from .models import (
    ExtractedNutrition,
    ExtractedReceiptItem,
    Food,
    GroceryTrip,
    MatchResult,
    Meal,
    MealItem,
    MealType,
    NutritionInfo,
    PurchasedItem,
)
from .matching import find_match, score_match
from .mapping import extracted_food_name, map_to_meal_items, map_to_trip_items
from .nutrition import NutritionSummary

__all__ = [
    "ExtractedNutrition",
    "ExtractedReceiptItem",
    "Food",
    "GroceryTrip",
    "MatchResult",
    "Meal",
    "MealItem",
    "MealType",
    "NutritionInfo",
    "PurchasedItem",
    "find_match",
    "score_match",
    "extracted_food_name",
    "map_to_meal_items",
    "map_to_trip_items",
    "NutritionSummary",
]

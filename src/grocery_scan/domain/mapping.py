"""Mapping of LLM-extracted receipt items onto the local food bank."""

from typing import List, Sequence

from .matching import find_match
from .models import ExtractedNutrition, ExtractedReceiptItem, Food, MealItem, PurchasedItem

DEFAULT_FOOD_NAME = "Scanned Food"


def extracted_food_name(nutrition: ExtractedNutrition) -> str:
    name = (nutrition.food_name or "").strip()
    return name or DEFAULT_FOOD_NAME


def map_to_trip_items(extracted: Sequence[ExtractedReceiptItem], foods: Sequence[Food]) -> List[PurchasedItem]:
    return [
        PurchasedItem(
            name=item.name,
            quantity=item.quantity_grams,
            price=item.price,
            food=find_match(item.name, foods),
        )
        for item in extracted
    ]


def map_to_meal_items(extracted: Sequence[ExtractedReceiptItem], foods: Sequence[Food]) -> List[MealItem]:
    return [
        MealItem(name=item.name, quantity=item.quantity_grams, food=find_match(item.name, foods))
        for item in extracted
    ]

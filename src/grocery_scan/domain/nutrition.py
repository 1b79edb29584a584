from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict, Iterable

from .models import GroceryTrip, Meal, NutritionInfo


@dataclass
class NutritionSummary:
    total_calories: float = 0.0
    total_protein: float = 0.0
    total_carbohydrates: float = 0.0
    total_fat: float = 0.0
    total_saturated_fat: float = 0.0
    total_sugar: float = 0.0
    total_fiber: float = 0.0
    total_sodium: float = 0.0

    @classmethod
    def zero(cls) -> "NutritionSummary":
        return cls()

    @classmethod
    def from_nutrition(cls, n: NutritionInfo) -> "NutritionSummary":
        return cls(
            total_calories=n.calories,
            total_protein=n.protein,
            total_carbohydrates=n.carbohydrates,
            total_fat=n.fat,
            total_saturated_fat=n.saturated_fat,
            total_sugar=n.sugar,
            total_fiber=n.fiber,
            total_sodium=n.sodium,
        )

    @classmethod
    def for_trips(cls, trips: Iterable[GroceryTrip]) -> "NutritionSummary":
        """Sum nutrition of every non-skipped, linked item across trips."""
        return cls.from_nutrition(
            NutritionInfo.total(
                item.calculated_nutrition
                for trip in trips
                for item in trip.items
                if not item.is_skipped
            )
        )

    @classmethod
    def for_meals(cls, meals: Iterable[Meal]) -> "NutritionSummary":
        return cls.from_nutrition(NutritionInfo.total(meal.total_nutrition for meal in meals))

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)

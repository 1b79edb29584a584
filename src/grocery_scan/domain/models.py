from __future__ import annotations

import enum
import uuid
from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple


@dataclass
class NutritionInfo:
    calories: float = 0.0       # kcal per 100g
    protein: float = 0.0        # g per 100g
    carbohydrates: float = 0.0  # g per 100g
    fat: float = 0.0            # g per 100g
    saturated_fat: float = 0.0  # g per 100g
    sugar: float = 0.0          # g per 100g
    fiber: float = 0.0          # g per 100g
    sodium: float = 0.0         # mg per 100g

    def scaled(self, grams: float) -> "NutritionInfo":
        """Return values for `grams` of food, given per-100g values."""
        factor = grams / 100.0
        return NutritionInfo(**{f.name: getattr(self, f.name) * factor for f in fields(self)})

    def __add__(self, other: "NutritionInfo") -> "NutritionInfo":
        return NutritionInfo(**{f.name: getattr(self, f.name) + getattr(other, f.name) for f in fields(self)})

    @classmethod
    def total(cls, values: Iterable[Optional["NutritionInfo"]]) -> "NutritionInfo":
        out = cls()
        for v in values:
            if v is not None:
                out = out + v
        return out

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NutritionInfo":
        known = {f.name for f in fields(cls)}
        return cls(**{k: float(v) for k, v in data.items() if k in known and v is not None})


@dataclass
class Food:
    name: str
    category: str = "other"
    nutrition: Optional[NutritionInfo] = None
    is_user_created: bool = True
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    created_at: datetime = field(default_factory=datetime.now)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Food":
        nutrition = data.get("nutrition")
        return cls(
            name=str(data["name"]),
            category=str(data.get("category") or "other"),
            nutrition=NutritionInfo.from_dict(nutrition) if isinstance(nutrition, dict) else None,
            is_user_created=bool(data.get("is_user_created", True)),
        )


@dataclass
class PurchasedItem:
    name: str
    quantity: float = 100.0  # grams
    price: float = 0.0
    food: Optional[Food] = None
    is_skipped: bool = False
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    @property
    def calculated_nutrition(self) -> Optional[NutritionInfo]:
        if self.food is None or self.food.nutrition is None:
            return None
        return self.food.nutrition.scaled(self.quantity)


@dataclass
class GroceryTrip:
    date: datetime = field(default_factory=datetime.now)
    store_name: Optional[str] = None
    items: List[PurchasedItem] = field(default_factory=list)
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    @property
    def total_spent(self) -> float:
        return sum(item.price for item in self.items)


class MealType(enum.Enum):
    BREAKFAST = "Breakfast"
    LUNCH = "Lunch"
    DINNER = "Dinner"
    SNACK = "Snack"

    @property
    def sort_order(self) -> int:
        return list(MealType).index(self)

    @property
    def default_time(self) -> Tuple[int, int]:
        return _MEAL_DEFAULT_TIMES[self]


_MEAL_DEFAULT_TIMES = {
    MealType.BREAKFAST: (8, 0),
    MealType.LUNCH: (12, 30),
    MealType.DINNER: (19, 0),
    MealType.SNACK: (15, 0),
}


@dataclass
class MealItem:
    name: str
    quantity: float = 100.0  # grams
    food: Optional[Food] = None
    is_skipped: bool = False
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    @property
    def calculated_nutrition(self) -> Optional[NutritionInfo]:
        if self.food is None or self.food.nutrition is None:
            return None
        return self.food.nutrition.scaled(self.quantity)


@dataclass
class Meal:
    date: datetime = field(default_factory=datetime.now)
    meal_type: MealType = MealType.LUNCH
    items: List[MealItem] = field(default_factory=list)
    notes: Optional[str] = None
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    @property
    def total_nutrition(self) -> NutritionInfo:
        """Total nutrition for all non-skipped items with linked foods."""
        return NutritionInfo.total(i.calculated_nutrition for i in self.items if not i.is_skipped)

    @property
    def items_with_nutrition(self) -> int:
        return sum(1 for i in self.items if not i.is_skipped and i.calculated_nutrition is not None)


@dataclass(frozen=True)
class MatchResult:
    candidate: Optional[Any]
    score: float

    @classmethod
    def none(cls) -> "MatchResult":
        return cls(None, 0.0)


@dataclass
class ExtractedReceiptItem:
    name: str
    quantity_grams: float = 100.0
    price: float = 0.0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExtractedReceiptItem":
        return cls(
            name=str(data.get("name") or ""),
            quantity_grams=float(data.get("quantity_grams", data.get("quantity", 100.0)) or 100.0),
            price=float(data.get("price") or 0.0),
        )


@dataclass
class ExtractedNutrition:
    food_name: Optional[str] = None
    nutrition: Optional[NutritionInfo] = None


# -*- coding: utf-8 -*-
"""Meals — Pydantic models."""

from __future__ import annotations

from datetime import date as date_type, datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator


class MealType(str, Enum):
    breakfast = "breakfast"
    lunch = "lunch"
    dinner = "dinner"
    snack = "snack"


class Confidence(str, Enum):
    high = "high"
    medium = "medium"
    low = "low"


class MealEntry(BaseModel):
    id: str
    user_id: str
    eaten_at: datetime
    meal_type: MealType = MealType.snack
    meal_name: Optional[str] = None
    food_items: List[str] = Field(default_factory=list)
    calories: int = Field(0, ge=0)
    protein: float = Field(0.0, ge=0)
    carbs: float = Field(0.0, ge=0)
    fats: float = Field(0.0, ge=0)
    fiber: float = Field(0.0, ge=0)
    sugar: float = Field(0.0, ge=0)
    serving_size: Optional[str] = None
    confidence: Optional[Confidence] = None
    image_url: Optional[str] = None
    drive_file_id: Optional[str] = None
    notes: Optional[str] = None
    created_at: str


class MealCreateRequest(BaseModel):
    eaten_at: Optional[datetime] = Field(None, description="ISO8601; defaults to now")
    meal_type: MealType = MealType.snack
    meal_name: Optional[str] = Field(None, max_length=256)
    food_items: List[str] = Field(default_factory=list)
    calories: int = Field(0, ge=0)
    protein: float = Field(0.0, ge=0)
    carbs: float = Field(0.0, ge=0)
    fats: float = Field(0.0, ge=0)
    fiber: float = Field(0.0, ge=0)
    sugar: float = Field(0.0, ge=0)
    serving_size: Optional[str] = Field(None, max_length=256)
    image_url: Optional[str] = None
    notes: Optional[str] = Field(None, max_length=2000)


class MealUpdateRequest(BaseModel):
    """Manual correction; only fields that are sent are changed."""

    eaten_at: Optional[datetime] = None
    meal_type: Optional[MealType] = None
    meal_name: Optional[str] = Field(None, max_length=256)
    food_items: Optional[List[str]] = None
    calories: Optional[int] = Field(None, ge=0)
    protein: Optional[float] = Field(None, ge=0)
    carbs: Optional[float] = Field(None, ge=0)
    fats: Optional[float] = Field(None, ge=0)
    fiber: Optional[float] = Field(None, ge=0)
    sugar: Optional[float] = Field(None, ge=0)
    serving_size: Optional[str] = Field(None, max_length=256)
    notes: Optional[str] = Field(None, max_length=2000)


class MealsResponse(BaseModel):
    count: int
    meals: List[MealEntry]


class MealAnalysis(BaseModel):
    food_items: List[str] = Field(default_factory=list)
    meal_name: str = "Unknown meal"
    calories: int = Field(0, ge=0)
    protein: float = Field(0.0, ge=0)
    carbs: float = Field(0.0, ge=0)
    fats: float = Field(0.0, ge=0)
    fiber: float = Field(0.0, ge=0)
    sugar: float = Field(0.0, ge=0)
    serving_size: str = "Unknown"
    confidence: Confidence = Confidence.low
    notes: str = ""
    extra: Dict[str, object] = Field(default_factory=dict, description="Reserved for model-specific fields")

    @field_validator("food_items", mode="before")
    @classmethod
    def _coerce_food_items(cls, value: object) -> List[str]:
        """Models sometimes answer with a single string instead of a list."""
        if value is None:
            return []
        if isinstance(value, str):
            v = value.strip()
            return [v] if v else []
        if isinstance(value, list):
            out: List[str] = []
            for item in value:
                if item is None:
                    continue
                s = str(item).strip()
                if s:
                    out.append(s)
            return out
        s = str(value).strip()
        return [s] if s else []


class MealUploadResponse(BaseModel):
    meal: MealEntry
    analysis: MealAnalysis
    analyzed: bool = Field(..., description="False when the fallback estimate was used")
    backed_up: bool = False


class MealDaySummary(BaseModel):
    date: date_type
    meal_count: int = Field(0, ge=0)
    total_calories: int = Field(0, ge=0)
    total_protein: float = Field(0.0, ge=0)
    total_carbs: float = Field(0.0, ge=0)
    total_fats: float = Field(0.0, ge=0)

# -*- coding: utf-8 -*-
"""Weight — Pydantic models."""

from __future__ import annotations

from datetime import date as date_type
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class WeightUnit(str, Enum):
    kg = "kg"
    lb = "lb"


class WeightEntry(BaseModel):
    id: str
    user_id: str
    date: date_type
    weight: float = Field(..., gt=0)
    unit: WeightUnit = WeightUnit.kg
    notes: Optional[str] = None
    created_at: str


class WeightUpsertRequest(BaseModel):
    date: Optional[date_type] = Field(None, description="YYYY-MM-DD; defaults to today")
    weight: float = Field(..., gt=0, le=1000)
    unit: WeightUnit = WeightUnit.kg
    notes: Optional[str] = Field(None, max_length=2000)


class WeightUpdateRequest(BaseModel):
    weight: Optional[float] = Field(None, gt=0, le=1000)
    unit: Optional[WeightUnit] = None
    notes: Optional[str] = Field(None, max_length=2000)


class WeightEntriesResponse(BaseModel):
    count: int
    entries: List[WeightEntry]

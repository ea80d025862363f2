# -*- coding: utf-8 -*-
"""Water intake — Pydantic models."""

from __future__ import annotations

from datetime import date as date_type
from typing import List, Optional

from pydantic import BaseModel, Field


class WaterEntry(BaseModel):
    id: str
    user_id: str
    date: date_type
    glasses: int = Field(0, ge=0)
    updated_at: str


class WaterIncrementRequest(BaseModel):
    date: Optional[date_type] = Field(None, description="YYYY-MM-DD; defaults to today")
    glasses: int = Field(1, ge=1, le=50)


class WaterSetRequest(BaseModel):
    date: Optional[date_type] = Field(None, description="YYYY-MM-DD; defaults to today")
    glasses: int = Field(..., ge=0, le=200)


class WaterResponse(BaseModel):
    date: date_type
    glasses: int = Field(0, ge=0)


class WaterEntriesResponse(BaseModel):
    count: int
    entries: List[WaterEntry]

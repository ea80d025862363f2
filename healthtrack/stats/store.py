# -*- coding: utf-8 -*-
"""Stats — record store interface consumed by the engine, and its SQLite implementation."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Protocol

from ..config import settings
from ..dates import Window
from ..exercise.models import ExerciseEntry
from ..exercise.storage import list_exercises
from ..meals.models import MealEntry
from ..meals.storage import list_meals
from ..profile.models import Goals
from ..profile.storage import get_goals
from ..water.models import WaterEntry
from ..water.storage import list_water
from ..weight.models import WeightEntry
from ..weight.storage import get_latest_weight, list_weights


class RecordStore(Protocol):
    """Read side of the record store.

    Implementations may return a superset of the requested window; the engine
    applies the exact window bounds itself. Failures raise ``StoreUnavailable``.
    """

    def list_meals(self, user_id: str, window: Optional[Window] = None) -> List[MealEntry]: ...

    def list_exercises(self, user_id: str, window: Optional[Window] = None) -> List[ExerciseEntry]: ...

    def list_water(self, user_id: str, window: Optional[Window] = None) -> List[WaterEntry]: ...

    def list_weights(self, user_id: str, window: Optional[Window] = None) -> List[WeightEntry]: ...

    def get_latest_weight(self, user_id: str) -> Optional[WeightEntry]: ...

    def get_goals(self, user_id: str) -> Goals: ...


class SQLiteRecordStore:
    def __init__(self, db_path: Path | None = None) -> None:
        self.db_path = db_path or settings.db_path

    def list_meals(self, user_id: str, window: Optional[Window] = None) -> List[MealEntry]:
        return list_meals(user_id, window, db_path=self.db_path)

    def list_exercises(self, user_id: str, window: Optional[Window] = None) -> List[ExerciseEntry]:
        return list_exercises(user_id, window, db_path=self.db_path)

    def list_water(self, user_id: str, window: Optional[Window] = None) -> List[WaterEntry]:
        return list_water(user_id, window, db_path=self.db_path)

    def list_weights(self, user_id: str, window: Optional[Window] = None) -> List[WeightEntry]:
        return list_weights(user_id, window, db_path=self.db_path)

    def get_latest_weight(self, user_id: str) -> Optional[WeightEntry]:
        return get_latest_weight(user_id, db_path=self.db_path)

    def get_goals(self, user_id: str) -> Goals:
        return get_goals(user_id, db_path=self.db_path)

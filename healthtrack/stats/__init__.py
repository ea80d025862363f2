# -*- coding: utf-8 -*-
"""Nutrition statistics: rollups, goal progress, macro split and streaks."""

from .engine import StatsEngine
from .store import RecordStore, SQLiteRecordStore

__all__ = ["RecordStore", "SQLiteRecordStore", "StatsEngine"]

# -*- coding: utf-8 -*-
"""Domain errors shared by storage, stats and backup."""

from __future__ import annotations


class StoreUnavailable(RuntimeError):
    """A record store read or write failed."""


class InvalidPeriod(ValueError):
    """Unrecognised aggregation period token."""

    def __init__(self, period: object) -> None:
        self.period = period
        super().__init__(f"Invalid period {period!r}; expected one of: day, week, month")


class BackupError(RuntimeError):
    """Remote backup (Google Drive) call failed."""

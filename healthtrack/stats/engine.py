# -*- coding: utf-8 -*-
"""Stats engine — daily/period rollups, goal progress, macro split and streaks.

The engine never writes. Every computation issues sequential reads against the
injected record store and aggregates in memory, so results are consistent only
as of the moment each read ran.
"""

from __future__ import annotations

import logging
import math
from collections import defaultdict
from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Optional, Union

from ..dates import Window, day_distance, end_of_day, local_now, start_of_day, to_local_naive
from ..errors import InvalidPeriod
from ..exercise.models import ExerciseEntry
from ..meals.models import MealEntry
from ..profile.models import (
    DEFAULT_CALORIE_GOAL,
    DEFAULT_CARBS_GOAL,
    DEFAULT_FATS_GOAL,
    DEFAULT_PROTEIN_GOAL,
    DEFAULT_WATER_GOAL,
    Goals,
)
from ..water.models import WaterEntry
from .models import (
    Dashboard,
    ExerciseDayPoint,
    MacroDistribution,
    MacroStats,
    MealDayPoint,
    NutritionTotals,
    Period,
    PeriodStats,
    ResolvedGoals,
    TodayTotals,
    WaterDayPoint,
    WeeklySeries,
    WeightDayPoint,
)
from .store import RecordStore

logger = logging.getLogger(__name__)

KCAL_PER_GRAM_PROTEIN = 4
KCAL_PER_GRAM_CARBS = 4
KCAL_PER_GRAM_FAT = 9

_ONE_DAY = timedelta(days=1)
_WEEKLY_SERIES_DAYS = 7


def round_half_up(value: float, places: int = 0) -> float:
    """Round like a person would: 2.5 -> 3, not banker's rounding."""
    exp = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(exp, rounding=ROUND_HALF_UP))


def parse_period(value: Union[str, Period]) -> Period:
    if isinstance(value, Period):
        return value
    try:
        return Period(str(value).strip().lower())
    except ValueError as exc:
        raise InvalidPeriod(value) from exc


def resolve_goals(goals: Goals) -> ResolvedGoals:
    return ResolvedGoals(
        calories=goals.daily_calorie_goal if goals.daily_calorie_goal is not None else DEFAULT_CALORIE_GOAL,
        protein=goals.protein_goal if goals.protein_goal is not None else DEFAULT_PROTEIN_GOAL,
        carbs=goals.carbs_goal if goals.carbs_goal is not None else DEFAULT_CARBS_GOAL,
        fats=goals.fats_goal if goals.fats_goal is not None else DEFAULT_FATS_GOAL,
        water=goals.water_goal if goals.water_goal is not None else DEFAULT_WATER_GOAL,
    )


def period_window(period: Period, as_of: datetime) -> Window:
    if period is Period.day:
        start = start_of_day(as_of.date())
    elif period is Period.week:
        # Rolling seven 24h days, unlike the calendar-aligned day and month.
        start = as_of - timedelta(days=7)
    else:
        start = start_of_day(as_of.date().replace(day=1))
    return Window(start=start, end=as_of)


def sum_nutrition(meals: Iterable[MealEntry], places: Optional[int] = 2) -> NutritionTotals:
    """Sum meal nutrition; ``places=None`` keeps the exact float sums."""
    calories = 0
    protein = carbs = fats = fiber = 0.0
    for meal in meals:
        calories += meal.calories
        protein += meal.protein
        carbs += meal.carbs
        fats += meal.fats
        fiber += meal.fiber
    if places is not None:
        protein, carbs, fats, fiber = (round(v, places) for v in (protein, carbs, fats, fiber))
    return NutritionTotals(calories=calories, protein=protein, carbs=carbs, fats=fats, fiber=fiber)


class StatsEngine:
    def __init__(self, store: RecordStore) -> None:
        self.store = store

    @staticmethod
    def _as_of(as_of: Optional[datetime]) -> datetime:
        return to_local_naive(as_of) if as_of is not None else local_now()

    def _meals_in(self, user_id: str, window: Window) -> List[MealEntry]:
        return [m for m in self.store.list_meals(user_id, window) if window.contains(m.eaten_at)]

    def _exercises_in(self, user_id: str, window: Window) -> List[ExerciseEntry]:
        return [e for e in self.store.list_exercises(user_id, window) if window.contains(e.performed_at)]

    def _water_in(self, user_id: str, window: Window) -> List[WaterEntry]:
        return [w for w in self.store.list_water(user_id, window) if window.contains_date(w.date)]

    def compute_dashboard(self, user_id: str, as_of: Optional[datetime] = None) -> Dashboard:
        now = self._as_of(as_of)
        today = Window.for_day(now.date())

        meals = self._meals_in(user_id, today)
        water = self._water_in(user_id, today)
        exercises = self._exercises_in(user_id, today)
        latest_weight = self.store.get_latest_weight(user_id)
        goals = resolve_goals(self.store.get_goals(user_id))

        totals = sum_nutrition(meals)
        burned = sum(e.calories_burned for e in exercises)
        return Dashboard(
            date=now.date(),
            goals=goals,
            today=TodayTotals(
                calories_consumed=totals.calories,
                protein=totals.protein,
                carbs=totals.carbs,
                fats=totals.fats,
                calories_burned=burned,
                net_calories=totals.calories - burned,
                water_glasses=sum(w.glasses for w in water),
                meal_count=len(meals),
                exercise_count=len(exercises),
            ),
            latest_weight=latest_weight,
        )

    def compute_period_stats(
        self,
        user_id: str,
        period: Union[str, Period],
        as_of: Optional[datetime] = None,
    ) -> PeriodStats:
        resolved = parse_period(period)
        window = period_window(resolved, self._as_of(as_of))

        meals = self._meals_in(user_id, window)
        exercises = self._exercises_in(user_id, window)
        water = self._water_in(user_id, window)
        goals = resolve_goals(self.store.get_goals(user_id))

        totals = sum_nutrition(meals)
        exact = sum_nutrition(meals, places=None)
        burned = sum(e.calories_burned for e in exercises)
        glasses = sum(w.glasses for w in water)
        days = max(1, math.ceil(window.span / _ONE_DAY))

        logger.debug(
            "period stats user=%s period=%s meals=%d exercises=%d days=%d",
            user_id,
            resolved.value,
            len(meals),
            len(exercises),
            days,
        )
        return PeriodStats(
            period=resolved,
            start=window.start,
            end=window.end,
            days=days,
            days_tracked=len({m.eaten_at.date() for m in meals}),
            meal_count=len(meals),
            exercise_count=len(exercises),
            total_calories=totals.calories,
            total_protein=totals.protein,
            total_carbs=totals.carbs,
            total_fats=totals.fats,
            total_fiber=totals.fiber,
            calories_burned=burned,
            net_calories=totals.calories - burned,
            total_exercise_minutes=round(sum(e.duration_min for e in exercises), 1),
            water_glasses=glasses,
            avg_daily_calories=int(round_half_up(exact.calories / days)),
            avg_daily_protein=int(round_half_up(exact.protein / days)),
            avg_daily_carbs=int(round_half_up(exact.carbs / days)),
            avg_daily_fats=int(round_half_up(exact.fats / days)),
            avg_daily_water=int(round_half_up(glasses / days)),
            goals=goals,
        )

    @staticmethod
    def compute_macro_distribution(totals: NutritionTotals) -> MacroDistribution:
        protein_kcal = totals.protein * KCAL_PER_GRAM_PROTEIN
        carbs_kcal = totals.carbs * KCAL_PER_GRAM_CARBS
        fats_kcal = totals.fats * KCAL_PER_GRAM_FAT
        total = protein_kcal + carbs_kcal + fats_kcal

        def pct(part: float) -> float:
            return round_half_up(part / total * 100, 1) if total > 0 else 0.0

        return MacroDistribution(
            protein_calories=round(protein_kcal, 2),
            carbs_calories=round(carbs_kcal, 2),
            fats_calories=round(fats_kcal, 2),
            total_calories=round(total, 2),
            protein_pct=pct(protein_kcal),
            carbs_pct=pct(carbs_kcal),
            fats_pct=pct(fats_kcal),
        )

    def compute_period_macros(
        self,
        user_id: str,
        period: Union[str, Period],
        as_of: Optional[datetime] = None,
    ) -> MacroStats:
        resolved = parse_period(period)
        window = period_window(resolved, self._as_of(as_of))
        totals = sum_nutrition(self._meals_in(user_id, window))
        return MacroStats(
            period=resolved,
            start=window.start,
            end=window.end,
            totals=totals,
            distribution=self.compute_macro_distribution(totals),
        )

    def compute_streak(self, user_id: str, as_of: Optional[datetime] = None) -> int:
        """Consecutive days with at least one meal, counting back from ``as_of``'s day."""
        today = self._as_of(as_of).date()
        meals = self.store.list_meals(user_id, Window(end=end_of_day(today)))
        # Days after as_of are skipped rather than ending the walk at zero.
        logged_days = sorted({m.eaten_at.date() for m in meals if m.eaten_at.date() <= today}, reverse=True)

        streak = 0
        for day in logged_days:
            if day_distance(today, day) != streak:
                break
            streak += 1
        return streak

    def compute_weekly_series(self, user_id: str, as_of: Optional[datetime] = None) -> WeeklySeries:
        last = self._as_of(as_of).date()
        first = last - timedelta(days=_WEEKLY_SERIES_DAYS - 1)
        window = Window.for_days(first, last)

        meals = self._meals_in(user_id, window)
        exercises = self._exercises_in(user_id, window)
        water = self._water_in(user_id, window)
        weights = [w for w in self.store.list_weights(user_id, window) if window.contains_date(w.date)]

        meals_by_day: Dict[date, List[MealEntry]] = defaultdict(list)
        for meal in meals:
            meals_by_day[meal.eaten_at.date()].append(meal)
        exercise_by_day: Dict[date, List[ExerciseEntry]] = defaultdict(list)
        for entry in exercises:
            exercise_by_day[entry.performed_at.date()].append(entry)
        water_by_day: Dict[date, int] = defaultdict(int)
        for entry in water:
            water_by_day[entry.date] += entry.glasses

        meal_points = []
        for day in sorted(meals_by_day):
            totals = sum_nutrition(meals_by_day[day])
            meal_points.append(
                MealDayPoint(
                    date=day,
                    meal_count=len(meals_by_day[day]),
                    calories=totals.calories,
                    protein=totals.protein,
                    carbs=totals.carbs,
                    fats=totals.fats,
                )
            )

        return WeeklySeries(
            start=first,
            end=last,
            meals=meal_points,
            exercise=[
                ExerciseDayPoint(
                    date=day,
                    exercise_count=len(exercise_by_day[day]),
                    calories_burned=sum(e.calories_burned for e in exercise_by_day[day]),
                    duration_min=round(sum(e.duration_min for e in exercise_by_day[day]), 1),
                )
                for day in sorted(exercise_by_day)
            ],
            water=[WaterDayPoint(date=day, glasses=water_by_day[day]) for day in sorted(water_by_day)],
            weight=[
                WeightDayPoint(date=w.date, weight=w.weight, unit=w.unit)
                for w in sorted(weights, key=lambda w: w.date)
            ],
        )

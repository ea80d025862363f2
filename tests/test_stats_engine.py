# -*- coding: utf-8 -*-

from __future__ import annotations

import unittest
from datetime import date, datetime
from typing import List, Optional
from uuid import uuid4

from healthtrack.dates import Window
from healthtrack.errors import InvalidPeriod, StoreUnavailable
from healthtrack.exercise.models import ExerciseEntry
from healthtrack.meals.models import MealEntry
from healthtrack.profile.models import Goals
from healthtrack.stats.engine import StatsEngine, round_half_up
from healthtrack.stats.models import NutritionTotals, Period
from healthtrack.water.models import WaterEntry
from healthtrack.weight.models import WeightEntry

USER = "u1"


def _meal(at: datetime, calories: int = 0, protein: float = 0.0, carbs: float = 0.0, fats: float = 0.0, fiber: float = 0.0) -> MealEntry:
    return MealEntry(
        id=str(uuid4()),
        user_id=USER,
        eaten_at=at,
        calories=calories,
        protein=protein,
        carbs=carbs,
        fats=fats,
        fiber=fiber,
        created_at=at.isoformat(),
    )


def _exercise(at: datetime, burned: int, minutes: float = 30.0) -> ExerciseEntry:
    return ExerciseEntry(
        id=str(uuid4()),
        user_id=USER,
        performed_at=at,
        name="run",
        exercise_type="cardio",
        duration_min=minutes,
        calories_burned=burned,
        created_at=at.isoformat(),
    )


def _water(day: date, glasses: int) -> WaterEntry:
    return WaterEntry(id=str(uuid4()), user_id=USER, date=day, glasses=glasses, updated_at=day.isoformat())


def _weight(day: date, kg: float) -> WeightEntry:
    return WeightEntry(id=str(uuid4()), user_id=USER, date=day, weight=kg, created_at=day.isoformat())


class InMemoryStore:
    """Returns every record regardless of the window; the engine must apply bounds itself."""

    def __init__(self) -> None:
        self.meals: List[MealEntry] = []
        self.exercises: List[ExerciseEntry] = []
        self.water: List[WaterEntry] = []
        self.weights: List[WeightEntry] = []
        self.goals = Goals()
        self.fail = False
        self.calls: List[str] = []

    def _check(self, name: str) -> None:
        self.calls.append(name)
        if self.fail:
            raise StoreUnavailable("store offline")

    def list_meals(self, user_id: str, window: Optional[Window] = None) -> List[MealEntry]:
        self._check("list_meals")
        return list(self.meals)

    def list_exercises(self, user_id: str, window: Optional[Window] = None) -> List[ExerciseEntry]:
        self._check("list_exercises")
        return list(self.exercises)

    def list_water(self, user_id: str, window: Optional[Window] = None) -> List[WaterEntry]:
        self._check("list_water")
        return list(self.water)

    def list_weights(self, user_id: str, window: Optional[Window] = None) -> List[WeightEntry]:
        self._check("list_weights")
        return list(self.weights)

    def get_latest_weight(self, user_id: str) -> Optional[WeightEntry]:
        self._check("get_latest_weight")
        return max(self.weights, key=lambda w: w.date) if self.weights else None

    def get_goals(self, user_id: str) -> Goals:
        self._check("get_goals")
        return self.goals


class TestPeriodStats(unittest.TestCase):
    def setUp(self) -> None:
        self.store = InMemoryStore()
        self.engine = StatsEngine(self.store)

    def test_day_totals_and_net(self) -> None:
        self.store.meals = [
            _meal(datetime(2024, 1, 10, 8, 0), 500, protein=30, carbs=50, fats=20, fiber=5),
            _meal(datetime(2024, 1, 10, 12, 30), 700, protein=40, carbs=60, fats=25, fiber=3),
            _meal(datetime(2024, 1, 9, 19, 0), 900),
        ]
        self.store.exercises = [_exercise(datetime(2024, 1, 10, 7, 0), 300)]
        self.store.water = [_water(date(2024, 1, 10), 4), _water(date(2024, 1, 9), 6)]

        stats = self.engine.compute_period_stats(USER, "day", as_of=datetime(2024, 1, 10, 18, 0))

        self.assertEqual(stats.period, Period.day)
        self.assertEqual(stats.start, datetime(2024, 1, 10, 0, 0))
        self.assertEqual(stats.days, 1)
        self.assertEqual(stats.meal_count, 2)
        self.assertEqual(stats.total_calories, 1200)
        self.assertAlmostEqual(stats.total_protein, 70.0)
        self.assertAlmostEqual(stats.total_fiber, 8.0)
        self.assertEqual(stats.calories_burned, 300)
        self.assertEqual(stats.net_calories, 900)
        self.assertEqual(stats.total_exercise_minutes, 30.0)
        self.assertEqual(stats.water_glasses, 4)
        self.assertEqual(stats.avg_daily_calories, 1200)
        self.assertEqual(stats.days_tracked, 1)

    def test_net_calories_can_be_negative(self) -> None:
        self.store.meals = [_meal(datetime(2024, 1, 10, 9, 0), 200)]
        self.store.exercises = [_exercise(datetime(2024, 1, 10, 10, 0), 500)]
        stats = self.engine.compute_period_stats(USER, Period.day, as_of=datetime(2024, 1, 10, 20, 0))
        self.assertEqual(stats.net_calories, -300)

    def test_totals_do_not_depend_on_order(self) -> None:
        meals = [_meal(datetime(2024, 1, 10, h, 0), 100 * h, protein=h) for h in (7, 9, 13, 19)]
        as_of = datetime(2024, 1, 10, 21, 0)
        self.store.meals = meals
        first = self.engine.compute_period_stats(USER, "day", as_of=as_of)
        self.store.meals = list(reversed(meals))
        second = self.engine.compute_period_stats(USER, "day", as_of=as_of)
        self.assertEqual(first.total_calories, second.total_calories)
        self.assertEqual(first.total_protein, second.total_protein)

    def test_day_period_at_midnight_still_counts_one_day(self) -> None:
        stats = self.engine.compute_period_stats(USER, "day", as_of=datetime(2024, 1, 10, 0, 0))
        self.assertEqual(stats.days, 1)
        self.assertEqual(stats.total_calories, 0)
        self.assertEqual(stats.avg_daily_calories, 0)

    def test_week_is_rolling_seven_days(self) -> None:
        as_of = datetime(2024, 1, 10, 12, 0)
        self.store.meals = [
            _meal(datetime(2024, 1, 3, 11, 59), 1000),
            _meal(datetime(2024, 1, 3, 12, 0), 700, protein=10.0),
            _meal(datetime(2024, 1, 8, 13, 0), 1400, protein=7.5),
        ]
        self.store.water = [_water(date(2024, 1, 3), 8), _water(date(2024, 1, 4), 7)]

        stats = self.engine.compute_period_stats(USER, "week", as_of=as_of)

        self.assertEqual(stats.start, datetime(2024, 1, 3, 12, 0))
        self.assertEqual(stats.end, as_of)
        self.assertEqual(stats.days, 7)
        self.assertEqual(stats.meal_count, 2)
        self.assertEqual(stats.total_calories, 2100)
        self.assertEqual(stats.avg_daily_calories, 300)
        # 17.5 g over 7 days is 2.5 g/day, rounded half up.
        self.assertEqual(stats.avg_daily_protein, 3)
        # Water dated 2024-01-03 sits at midnight, before the window opens.
        self.assertEqual(stats.water_glasses, 7)
        self.assertEqual(stats.avg_daily_water, 1)

    def test_month_starts_on_first_calendar_day(self) -> None:
        as_of = datetime(2024, 1, 15, 10, 0)
        self.store.meals = [
            _meal(datetime(2023, 12, 31, 23, 59), 999),
            _meal(datetime(2024, 1, 1, 0, 0), 1500),
            _meal(datetime(2024, 1, 1, 12, 0), 500),
            _meal(datetime(2024, 1, 14, 12, 0), 1000),
        ]
        stats = self.engine.compute_period_stats(USER, "month", as_of=as_of)
        self.assertEqual(stats.start, datetime(2024, 1, 1, 0, 0))
        self.assertEqual(stats.days, 15)
        self.assertEqual(stats.total_calories, 3000)
        self.assertEqual(stats.avg_daily_calories, 200)
        self.assertEqual(stats.days_tracked, 2)

    def test_window_end_is_inclusive(self) -> None:
        as_of = datetime(2024, 1, 10, 18, 0)
        self.store.meals = [
            _meal(as_of, 450),
            _meal(datetime(2024, 1, 10, 18, 0, 1), 800),
        ]
        stats = self.engine.compute_period_stats(USER, "day", as_of=as_of)
        self.assertEqual(stats.total_calories, 450)

    def test_default_goals(self) -> None:
        stats = self.engine.compute_period_stats(USER, "day", as_of=datetime(2024, 1, 10, 12, 0))
        self.assertEqual(stats.goals.calories, 2000)
        self.assertEqual(stats.goals.water, 8)
        self.assertEqual(stats.goals.protein, 150)
        self.assertEqual(stats.goals.carbs, 200)
        self.assertEqual(stats.goals.fats, 65)

    def test_profile_goals_override_defaults(self) -> None:
        self.store.goals = Goals(daily_calorie_goal=1800, water_goal=10)
        stats = self.engine.compute_period_stats(USER, "day", as_of=datetime(2024, 1, 10, 12, 0))
        self.assertEqual(stats.goals.calories, 1800)
        self.assertEqual(stats.goals.water, 10)
        self.assertEqual(stats.goals.protein, 150)

    def test_unknown_period_is_rejected(self) -> None:
        with self.assertRaises(InvalidPeriod) as ctx:
            self.engine.compute_period_stats(USER, "year", as_of=datetime(2024, 1, 10, 12, 0))
        self.assertEqual(ctx.exception.period, "year")
        self.assertEqual(self.store.calls, [])

    def test_store_failure_propagates(self) -> None:
        self.store.fail = True
        with self.assertRaises(StoreUnavailable):
            self.engine.compute_period_stats(USER, "week", as_of=datetime(2024, 1, 10, 12, 0))


class TestMacroDistribution(unittest.TestCase):
    def test_calorie_conversion_and_shares(self) -> None:
        dist = StatsEngine.compute_macro_distribution(NutritionTotals(protein=100, carbs=200, fats=50))
        self.assertEqual(dist.protein_calories, 400)
        self.assertEqual(dist.carbs_calories, 800)
        self.assertEqual(dist.fats_calories, 450)
        self.assertEqual(dist.total_calories, 1650)
        self.assertEqual(dist.protein_pct, 24.2)
        self.assertEqual(dist.carbs_pct, 48.5)
        self.assertEqual(dist.fats_pct, 27.3)
        self.assertAlmostEqual(dist.protein_pct + dist.carbs_pct + dist.fats_pct, 100.0, places=1)

    def test_empty_totals_give_zero_shares(self) -> None:
        dist = StatsEngine.compute_macro_distribution(NutritionTotals())
        self.assertEqual(dist.total_calories, 0)
        self.assertEqual((dist.protein_pct, dist.carbs_pct, dist.fats_pct), (0.0, 0.0, 0.0))

    def test_round_half_up(self) -> None:
        self.assertEqual(round_half_up(2.5), 3)
        self.assertEqual(round_half_up(0.5), 1)
        self.assertEqual(round_half_up(24.25, 1), 24.3)

    def test_daily_average_uses_unrounded_total(self) -> None:
        store = InMemoryStore()
        store.meals = [_meal(datetime(2024, 1, 10, 8, 0), 100, protein=2.4996)]
        stats = StatsEngine(store).compute_period_stats(USER, "day", as_of=datetime(2024, 1, 10, 12, 0))
        # The displayed total rounds to 2.5 but the average comes from 2.4996.
        self.assertEqual(stats.total_protein, 2.5)
        self.assertEqual(stats.avg_daily_protein, 2)


class TestStreak(unittest.TestCase):
    def setUp(self) -> None:
        self.store = InMemoryStore()
        self.store.meals = [
            _meal(datetime(2024, 1, 10, 8, 0)),
            _meal(datetime(2024, 1, 10, 19, 0)),
            _meal(datetime(2024, 1, 9, 12, 0)),
            _meal(datetime(2024, 1, 8, 12, 0)),
            _meal(datetime(2024, 1, 5, 12, 0)),
        ]
        self.engine = StatsEngine(self.store)

    def test_consecutive_days(self) -> None:
        self.assertEqual(self.engine.compute_streak(USER, as_of=datetime(2024, 1, 10, 9, 0)), 3)

    def test_no_meal_today_breaks_streak(self) -> None:
        self.assertEqual(self.engine.compute_streak(USER, as_of=datetime(2024, 1, 11, 9, 0)), 0)

    def test_future_meals_are_ignored(self) -> None:
        self.store.meals.append(_meal(datetime(2024, 1, 12, 8, 0)))
        self.assertEqual(self.engine.compute_streak(USER, as_of=datetime(2024, 1, 10, 9, 0)), 3)

    def test_empty_history(self) -> None:
        self.store.meals = []
        self.assertEqual(self.engine.compute_streak(USER, as_of=datetime(2024, 1, 10, 9, 0)), 0)


class TestWeeklySeries(unittest.TestCase):
    def test_series_is_sparse_and_ascending(self) -> None:
        store = InMemoryStore()
        # 2024-01-08 is a Monday, 2024-01-10 a Wednesday.
        store.meals = [
            _meal(datetime(2024, 1, 10, 12, 0), 600, protein=30),
            _meal(datetime(2024, 1, 8, 8, 0), 400, protein=20),
            _meal(datetime(2024, 1, 8, 19, 0), 800, protein=40),
            _meal(datetime(2024, 1, 3, 12, 0), 999),
        ]
        store.exercises = [_exercise(datetime(2024, 1, 9, 7, 0), 250, minutes=45)]
        store.water = [_water(date(2024, 1, 9), 6)]
        store.weights = [_weight(date(2024, 1, 10), 71.5), _weight(date(2024, 1, 4), 72.0), _weight(date(2024, 1, 1), 73.0)]

        series = StatsEngine(store).compute_weekly_series(USER, as_of=datetime(2024, 1, 10, 9, 0))

        self.assertEqual(series.start, date(2024, 1, 4))
        self.assertEqual(series.end, date(2024, 1, 10))
        self.assertEqual([p.date for p in series.meals], [date(2024, 1, 8), date(2024, 1, 10)])
        self.assertEqual(series.meals[0].calories, 1200)
        self.assertEqual(series.meals[0].meal_count, 2)
        self.assertAlmostEqual(series.meals[0].protein, 60.0)
        self.assertEqual(len(series.exercise), 1)
        self.assertEqual(series.exercise[0].calories_burned, 250)
        self.assertEqual([(p.date, p.glasses) for p in series.water], [(date(2024, 1, 9), 6)])
        self.assertEqual([p.date for p in series.weight], [date(2024, 1, 4), date(2024, 1, 10)])


class TestDashboard(unittest.TestCase):
    def test_today_totals_goals_and_latest_weight(self) -> None:
        store = InMemoryStore()
        store.meals = [
            _meal(datetime(2024, 1, 10, 8, 0), 450, protein=25, carbs=40, fats=15),
            _meal(datetime(2024, 1, 10, 13, 0), 650, protein=35, carbs=70, fats=20),
            _meal(datetime(2024, 1, 9, 20, 0), 900),
        ]
        store.exercises = [_exercise(datetime(2024, 1, 10, 6, 30), 320)]
        store.water = [_water(date(2024, 1, 10), 5)]
        store.weights = [_weight(date(2024, 1, 2), 72.4), _weight(date(2024, 1, 9), 71.8)]

        dash = StatsEngine(store).compute_dashboard(USER, as_of=datetime(2024, 1, 10, 15, 0))

        self.assertEqual(dash.date, date(2024, 1, 10))
        self.assertEqual(dash.today.calories_consumed, 1100)
        self.assertAlmostEqual(dash.today.protein, 60.0)
        self.assertEqual(dash.today.calories_burned, 320)
        self.assertEqual(dash.today.net_calories, 780)
        self.assertEqual(dash.today.water_glasses, 5)
        self.assertEqual(dash.today.meal_count, 2)
        self.assertEqual(dash.today.exercise_count, 1)
        self.assertEqual(dash.goals.calories, 2000)
        self.assertIsNotNone(dash.latest_weight)
        self.assertEqual(dash.latest_weight.weight, 71.8)

    def test_empty_day(self) -> None:
        dash = StatsEngine(InMemoryStore()).compute_dashboard(USER, as_of=datetime(2024, 1, 10, 15, 0))
        self.assertEqual(dash.today.calories_consumed, 0)
        self.assertEqual(dash.today.water_glasses, 0)
        self.assertIsNone(dash.latest_weight)

    def test_store_failure_propagates(self) -> None:
        store = InMemoryStore()
        store.fail = True
        with self.assertRaises(StoreUnavailable):
            StatsEngine(store).compute_dashboard(USER, as_of=datetime(2024, 1, 10, 15, 0))


if __name__ == "__main__":
    unittest.main()

# -*- coding: utf-8 -*-

from __future__ import annotations

import unittest
from unittest import mock

import httpx

from healthtrack.meals import vision
from healthtrack.meals.models import Confidence, MealAnalysis
from healthtrack.meals.vision import VisionSettings, _normalize_analysis, _parse_model_output_json, analyze_meal_image


def _cfg(api_key: str | None = "test-key") -> VisionSettings:
    return VisionSettings(
        base_url="https://vision.invalid",
        api_key=api_key,
        model="test-model",
        timeout=1.0,
        max_tokens=256,
    )


class TestMealVisionParsing(unittest.TestCase):
    def test_fenced_json_with_trailing_comma(self) -> None:
        text = 'Here you go:\n```json\n{"mealName": "Oatmeal", "estimatedCalories": 320,}\n```'
        parsed = _parse_model_output_json(text)
        self.assertEqual(parsed["mealName"], "Oatmeal")
        self.assertEqual(parsed["estimatedCalories"], 320)

    def test_no_json_raises(self) -> None:
        with self.assertRaises(ValueError):
            _parse_model_output_json("I cannot see any food in this picture.")

    def test_aliases_and_numeric_strings(self) -> None:
        parsed = {
            "foodItems": "rice, grilled chicken",
            "estimatedCalories": "540 kcal",
            "protein": "38g",
            "carbohydrates": "61.5",
            "fat": 12,
            "fiber": None,
            "servingSize": "1 plate",
            "confidence": 82,
            "cuisine": "home",
        }
        result = MealAnalysis.model_validate(_normalize_analysis(parsed))
        self.assertEqual(result.food_items, ["rice", "grilled chicken"])
        self.assertEqual(result.meal_name, "rice, grilled chicken")
        self.assertEqual(result.calories, 540)
        self.assertEqual(result.protein, 38.0)
        self.assertEqual(result.carbs, 61.5)
        self.assertEqual(result.fats, 12.0)
        self.assertEqual(result.fiber, 0.0)
        self.assertEqual(result.serving_size, "1 plate")
        self.assertEqual(result.confidence, Confidence.high)
        self.assertEqual(result.extra, {"cuisine": "home"})

    def test_item_dicts_and_word_confidence(self) -> None:
        parsed = {
            "items": [{"name": "apple"}, {"food": "yogurt"}, None],
            "mealName": "Snack",
            "calories": -20,
            "confidence": "Medium",
        }
        result = MealAnalysis.model_validate(_normalize_analysis(parsed))
        self.assertEqual(result.food_items, ["apple", "yogurt"])
        self.assertEqual(result.meal_name, "Snack")
        self.assertEqual(result.calories, 0)
        self.assertEqual(result.confidence, Confidence.medium)
        self.assertEqual(result.serving_size, "Unknown")


class TestAnalyzeMealImage(unittest.TestCase):
    def test_missing_key_returns_fallback(self) -> None:
        with mock.patch.object(vision, "resolve_vision_settings", return_value=_cfg(api_key=None)):
            analysis, analyzed = analyze_meal_image(image_bytes=b"\xff\xd8", image_mime="image/jpeg")
        self.assertFalse(analyzed)
        self.assertEqual(analysis.meal_name, "Unknown meal")
        self.assertEqual(analysis.calories, 0)
        self.assertEqual(analysis.confidence, Confidence.low)

    def test_http_failure_returns_fallback(self) -> None:
        with mock.patch.object(vision, "resolve_vision_settings", return_value=_cfg()), mock.patch.object(
            vision, "_call_messages_api", side_effect=httpx.ConnectError("boom")
        ):
            analysis, analyzed = analyze_meal_image(image_bytes=b"\xff\xd8", image_mime="image/jpeg")
        self.assertFalse(analyzed)
        self.assertEqual(analysis.food_items, ["Unknown food"])
        self.assertIn("boom", str(analysis.extra.get("error")))

    def test_successful_response(self) -> None:
        response = {
            "type": "message",
            "content": [
                {
                    "type": "text",
                    "text": '{"foodItems": ["salad"], "mealName": "Green salad", "estimatedCalories": 180, '
                    '"protein": 6, "carbs": 14, "fats": 11, "confidence": "high"}',
                }
            ],
        }
        with mock.patch.object(vision, "resolve_vision_settings", return_value=_cfg()), mock.patch.object(
            vision, "_call_messages_api", return_value=response
        ):
            analysis, analyzed = analyze_meal_image(image_bytes=b"\xff\xd8", image_mime="image/jpeg")
        self.assertTrue(analyzed)
        self.assertEqual(analysis.meal_name, "Green salad")
        self.assertEqual(analysis.calories, 180)
        self.assertEqual(analysis.confidence, Confidence.high)


if __name__ == "__main__":
    unittest.main()

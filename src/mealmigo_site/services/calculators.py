"""BMI, BMR and TDEE calculators used by the public pages and the quiz."""

import math
from typing import Literal

Sex = Literal["male", "female"]
Activity = Literal["sedentary", "light", "moderate", "very", "extra"]

ACTIVITY_FACTORS: dict[str, float] = {
    "sedentary": 1.2,
    "light": 1.375,
    "moderate": 1.55,
    "very": 1.725,
    "extra": 1.9,
}


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up, not to even."""
    return math.floor(value + 0.5)


def bmi(height_cm: float | None, weight_kg: float | None) -> float | None:
    """Return BMI rounded to one decimal, or None for missing or invalid input."""
    if height_cm is None or weight_kg is None or height_cm <= 0:
        return None
    meters = height_cm / 100
    return round_half_up(weight_kg / (meters * meters) * 10) / 10


def bmi_category(value: float) -> str:
    if value < 18.5:
        return "Underweight"
    if value < 25:
        return "Normal"
    if value < 30:
        return "Overweight"
    return "Obese"


def bmr(age: float, height_cm: float, weight_kg: float, sex: Sex) -> int:
    """Mifflin-St Jeor basal metabolic rate in kcal/day."""
    base = 10 * weight_kg + 6.25 * height_cm - 5 * age
    return round_half_up(base + (5 if sex == "male" else -161))


def tdee(bmr_value: float, activity: Activity) -> int:
    """Total daily energy expenditure for an activity level."""
    return round_half_up(bmr_value * ACTIVITY_FACTORS[activity])

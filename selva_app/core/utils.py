"""Utility helpers for the Protocolo Selva application."""
from typing import Optional

# Upper bounds (exclusive) for each BMI band, checked in order
BMI_CATEGORIES = (
    (18.5, "Abaixo do peso"),
    (25.0, "Peso normal"),
    (30.0, "Sobrepeso"),
    (35.0, "Obesidade I"),
    (40.0, "Obesidade II"),
)
BMI_TOP_CATEGORY = "Obesidade III"


def calculate_bmi(weight: float, height: float) -> Optional[float]:
    """Body mass index rounded to one decimal.

    weight: kg, height: cm. Returns None when either value is missing or
    not positive.
    """
    try:
        w = float(weight)
        h = float(height)
    except (TypeError, ValueError):
        return None
    if w <= 0 or h <= 0:
        return None

    height_m = h / 100
    return round(w / (height_m * height_m), 1)


def bmi_category(bmi: float) -> str:
    """Label for a BMI value using the WHO bands."""
    for upper, label in BMI_CATEGORIES:
        if bmi < upper:
            return label
    return BMI_TOP_CATEGORY

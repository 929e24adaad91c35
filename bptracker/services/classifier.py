"""Blood pressure risk classification."""

from bptracker.domain.models import Category, Reading

HIGH_SYSTOLIC = 140
HIGH_DIASTOLIC = 90
ELEVATED_SYSTOLIC = 120
ELEVATED_DIASTOLIC = 80


def classify(systolic: int, diastolic: int) -> Category:
    """
    Map a systolic/diastolic pair to a risk category.

    Evaluated in precedence order, first match wins. Total over all integers.
    """
    if systolic >= HIGH_SYSTOLIC or diastolic >= HIGH_DIASTOLIC:
        return Category.HIGH
    if systolic >= ELEVATED_SYSTOLIC or diastolic >= ELEVATED_DIASTOLIC:
        return Category.ELEVATED
    return Category.NORMAL


def classify_reading(reading: Reading) -> Category:
    return classify(reading.systolic, reading.diastolic)

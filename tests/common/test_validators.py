from decimal import Decimal

import pytest

from shift_tracker.common.validators import (
    require_email,
    require_month,
    require_positive_amount,
    require_year,
)
from shift_tracker.core.exceptions import ValidationError


def test_email_is_trimmed_and_lowercased():
    assert require_email("  Ana.Perez@Example.COM ") == "ana.perez@example.com"


@pytest.mark.parametrize("value", ["", "sin-arroba", "a@b"])
def test_invalid_email_rejected(value):
    with pytest.raises(ValidationError):
        require_email(value)


def test_month_and_year_ranges():
    assert require_month("3") == 3
    assert require_year(2025) == 2025
    with pytest.raises(ValidationError):
        require_month(13)
    with pytest.raises(ValidationError):
        require_year("abc")


def test_amount_accepts_comma_and_keeps_two_decimals():
    assert require_positive_amount("12,5") == Decimal("12.50")
    assert require_positive_amount(Decimal("7")) == Decimal("7.00")


@pytest.mark.parametrize("value", ["0", "-1", "1.234", "abc", None, "NaN"])
def test_invalid_amounts_rejected(value):
    with pytest.raises(ValidationError):
        require_positive_amount(value)

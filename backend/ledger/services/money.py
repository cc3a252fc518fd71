from decimal import Decimal

from ledger.exceptions import ValidationError

CENT = Decimal("0.01")
# Money columns are DecimalField(max_digits=18, decimal_places=2).
MAX_MAGNITUDE = Decimal("1e16")


def check_money(value, label):
    """
    Reject amounts the money columns cannot store exactly: non-finite
    values, values with sixteen or more integer digits, and values with
    more than two decimal places. Returns the value as a Decimal.
    """
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    if not value.is_finite() or abs(value) >= MAX_MAGNITUDE:
        raise ValidationError(f"{label} is out of range.")
    if value != value.quantize(CENT):
        raise ValidationError(f"{label} must have at most 2 decimal places.")
    return value

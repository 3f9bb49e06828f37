from decimal import Decimal, ROUND_HALF_UP

CENTS = Decimal('0.01')
ZERO = Decimal('0')
# Largest value a DecimalField(max_digits=12, decimal_places=2) can hold.
MAX_AMOUNT = Decimal('9999999999.99')


def to_decimal(value):
    if value is None or value == '':
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_money(value):
    """Round a currency amount to 2 places, half up."""
    return to_decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


def fits_money_field(value):
    """True when ``value`` is finite and fits a 12-digit, 2-place money column."""
    value = to_decimal(value)
    return value.is_finite() and abs(value) <= MAX_AMOUNT

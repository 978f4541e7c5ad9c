"""Fixed-precision rounding for prices, volumes and indicator values.

Every value handed out of chartcore passes through one of these helpers,
so repeated calls on identical input produce identical Decimals.
Rounding is applied to the exact binary value of the float, half away
from zero.
"""

from decimal import ROUND_HALF_UP, Decimal

PRICE_PLACES = 4
VOLUME_PLACES = 2
RSI_PLACES = 2

_EXPONENTS = {places: Decimal(1).scaleb(-places) for places in range(0, 9)}


def quantize(value: float | Decimal, places: int) -> Decimal:
    """Round a value to a fixed number of decimal places."""
    if not isinstance(value, Decimal):
        value = Decimal(value)
    return value.quantize(_EXPONENTS[places], rounding=ROUND_HALF_UP)


def round_price(value: float | Decimal) -> Decimal:
    return quantize(value, PRICE_PLACES)


def round_volume(value: float | Decimal) -> Decimal:
    return quantize(value, VOLUME_PLACES)

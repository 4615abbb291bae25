"""Rounding applied at the presentation boundary.

Engine arithmetic runs on unrounded floats. Values are converted to
``Decimal`` quantized to a fixed number of places only when they are
written into an output model (snapshot, contribution, schedule entry).
"""

from decimal import ROUND_HALF_UP, Decimal

from contract_engine.config import DECIMAL_PLACES


def to_money(value: float, places: int = DECIMAL_PLACES) -> Decimal:
    """Round a float to a currency ``Decimal``.

    Parameters
    ----------
    value : float
        Unrounded amount.
    places : int
        Decimal places to keep.

    Returns
    -------
    Decimal
        Amount quantized half-up to ``places``.
    """
    quantum = Decimal(1).scaleb(-places)
    return Decimal(repr(float(value))).quantize(quantum, rounding=ROUND_HALF_UP)


def zero_money(places: int = DECIMAL_PLACES) -> Decimal:
    return Decimal(0).quantize(Decimal(1).scaleb(-places))

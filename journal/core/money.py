import math


def round_half_up(value: float, digits: int = 0) -> float:
    """Round with ties going up, as JavaScript's ``Math.round`` does.

    ``round()`` sends ties to the even neighbour, so 0.125 would display as 0.12.
    """
    scale = 10 ** digits
    return math.floor(value * scale + 0.5) / scale


def round_money(value: float) -> float:
    """Two-decimal display value for a rupee amount."""
    return round_half_up(value, 2)

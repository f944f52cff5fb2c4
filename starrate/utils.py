from datetime import timedelta
import math

import numpy as np


class lazyval:
    """Decorator to lazily compute and cache a value.
    """
    def __init__(self, fget):
        self._fget = fget
        self._name = None

    def __set_name__(self, owner, name):
        self._name = name

    def __get__(self, instance, owner):
        if instance is None:
            return self

        try:
            return vars(instance)[self._name]
        except KeyError:
            value = vars(instance)[self._name] = self._fget(instance)
            return value

    def __set__(self, instance, value):
        vars(instance)[self._name] = value


def accuracy(count_300, count_100, count_50, count_miss):
    """Calculate osu! standard accuracy from discrete hit counts.

    Parameters
    ----------
    count_300 : int
        The number of 300's hit.
    count_100 : int
        The number of 100's hit.
    count_50 : int
        The number of 50's hit.
    count_miss : int
        The number of misses

    Returns
    -------
    accuracy : float
        The accuracy in the range [0, 1]. A play with no judgements has an
        accuracy of 0.
    """
    points_of_hits = count_300 * 300 + count_100 * 100 + count_50 * 50
    total_hits = count_300 + count_100 + count_50 + count_miss
    if not total_hits:
        return 0.0
    return points_of_hits / (total_hits * 300)


def to_ms(value):
    """Convert a time value into float milliseconds.

    Parameters
    ----------
    value : timedelta or float
        The time. Plain numbers are assumed to already be in milliseconds.

    Returns
    -------
    ms : float
        The time in milliseconds.
    """
    if isinstance(value, timedelta):
        return value.total_seconds() * 1000
    return float(value)


def clamp(value, low, high):
    return min(max(value, low), high)


def lerp(start, end, amount):
    return start + (end - start) * amount


def reverse_lerp(value, start, end):
    """The inverse of :func:`lerp`, clamped to [0, 1].
    """
    if start == end:
        return 0.0
    return clamp((value - start) / (end - start), 0.0, 1.0)


def logistic(x):
    return 1 / (1 + math.exp(-x))


def power_mean(values, p):
    """Combine non-negative values with a p-norm.

    Parameters
    ----------
    values : iterable[float]
        The values to combine.
    p : float
        The exponent.

    Returns
    -------
    combined : float
        ``(sum(v ** p)) ** (1 / p)``
    """
    values = np.asarray(list(values), dtype=float)
    return float(np.sum(values ** p) ** (1 / p))


def difficulty_range(difficulty, low, mid, high):
    """Map a 0-10 difficulty setting onto a range of values.

    Parameters
    ----------
    difficulty : float
        The difficulty setting, for example an approach rate.
    low : float
        The value at difficulty 0.
    mid : float
        The value at difficulty 5.
    high : float
        The value at difficulty 10.

    Returns
    -------
    value : float
        The interpolated value.
    """
    if difficulty > 5:
        return mid + (high - mid) * (difficulty - 5) / 5
    if difficulty < 5:
        return mid - (mid - low) * (5 - difficulty) / 5
    return mid


def inverse_difficulty_range(value, low, mid, high):
    """The inverse of :func:`difficulty_range`.
    """
    if np.sign(value - mid) == np.sign(high - mid):
        return (value - mid) / (high - mid) * 5 + 5
    return (value - mid) / (mid - low) * 5 + 5

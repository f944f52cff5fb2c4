from collections import namedtuple

from .deviation import unstable_rate

#: Bumped whenever a change to the formulas changes the computed attributes.
VERSION = 1


class JudgementCounts(namedtuple('JudgementCounts', [
        'perfect',
        'great',
        'good',
        'ok',
        'meh',
        'miss',
        'large_tick_hit',
        'small_tick_hit',
        'small_tick_miss',
])):
    """The number of each judgement in a play.

    Parameters
    ----------
    perfect : int, optional
        osu!mania perfects (MAX).
    great : int, optional
        300s, or caught fruits in osu!catch.
    good : int, optional
        osu!mania 200s.
    ok : int, optional
        100s.
    meh : int, optional
        50s.
    miss : int, optional
        Misses.
    large_tick_hit : int, optional
        osu!catch droplets caught.
    small_tick_hit : int, optional
        osu!catch tiny droplets caught.
    small_tick_miss : int, optional
        osu!catch tiny droplets missed.

    Raises
    ------
    ValueError
        Raised when any count is negative.
    """
    def __new__(cls,
                perfect=0,
                great=0,
                good=0,
                ok=0,
                meh=0,
                miss=0,
                large_tick_hit=0,
                small_tick_hit=0,
                small_tick_miss=0):
        self = super().__new__(
            cls,
            perfect,
            great,
            good,
            ok,
            meh,
            miss,
            large_tick_hit,
            small_tick_hit,
            small_tick_miss,
        )
        for name, value in zip(self._fields, self):
            if value < 0:
                raise ValueError(f'{name} count must be non-negative: {value}')
        return self

    @property
    def total(self):
        return sum(self)


class PerformanceAttributes:
    """Mixin for the performance attribute namedtuples.

    Subclasses have ``total`` and ``deviation`` fields.
    """
    __slots__ = ()

    @property
    def unstable_rate(self):
        """The estimated unstable rate (deviation x 10), or None.
        """
        return unstable_rate(self.deviation)

from collections import namedtuple
import math

from ..attributes import PerformanceAttributes
from ..calculator import PerformanceCalculator
from ..mod import Mod
from .difficulty import CatchDifficultyAttributes


class CatchPerformanceAttributes(PerformanceAttributes,
                                 namedtuple('CatchPerformanceAttributes',
                                            'total deviation accuracy')):
    """The performance of an osu!catch play.

    Parameters
    ----------
    total : float
        The performance points of the play.
    deviation : None
        osu!catch judgements carry no timing, so there is never a deviation
        estimate.
    accuracy : float
        The share of caught objects, including tiny droplets.
    """
    __slots__ = ()


def catch_accuracy(counts):
    """The accuracy of an osu!catch play in the range [0, 1].
    """
    caught = counts.great + counts.large_tick_hit + counts.small_tick_hit
    total = caught + counts.small_tick_miss + counts.miss
    if not total:
        return 0.0
    return caught / total


class CatchPerformanceCalculator(PerformanceCalculator):
    """The osu!catch performance calculator.
    """
    attributes_type = CatchDifficultyAttributes

    def max_judgements(self):
        return self.attributes.max_combo

    def validate(self, counts):
        # tiny droplets are not part of the chart model so only the combo
        # judgements are bounded
        combo_judgements = counts.great + counts.large_tick_hit + counts.miss
        if combo_judgements > self.max_judgements():
            raise ValueError(
                f'{combo_judgements} combo judgements exceed the max combo'
                f' of {self.max_judgements()}',
            )

    def calculate(self, counts, combo=None, *, cancellation=None):
        attributes = self.attributes
        mods = attributes.mods
        max_combo = attributes.max_combo
        combo = max_combo if combo is None else combo

        value = (
            5 * max(1.0, attributes.star_rating / 0.0049) - 4
        ) ** 2 / 100000

        combo_hits = counts.great + counts.large_tick_hit + counts.miss
        length_bonus = 0.95 + 0.3 * min(1.0, combo_hits / 2500)
        if combo_hits > 2500:
            length_bonus += math.log10(combo_hits / 2500) * 0.475
        value *= length_bonus

        value *= 0.97 ** counts.miss

        if max_combo > 0:
            value *= min(combo ** 0.8 / max_combo ** 0.8, 1.0)

        ar = attributes.approach_rate
        ar_factor = 1.0
        if ar > 9.0:
            ar_factor += 0.1 * (ar - 9.0)
        if ar > 10.0:
            ar_factor += 0.1 * (ar - 10.0)
        elif ar < 8.0:
            ar_factor += 0.025 * (8.0 - ar)
        value *= ar_factor

        if mods & Mod.hidden:
            if ar <= 10:
                value *= 1.05 + 0.075 * (10.0 - ar)
            else:
                value *= 1.01 + 0.04 * (11.0 - min(11.0, ar))

        if mods & Mod.flashlight:
            value *= 1.35 * length_bonus

        accuracy = catch_accuracy(counts)
        value *= accuracy ** 5.5

        if mods & Mod.no_fail:
            value *= 0.90

        return CatchPerformanceAttributes(
            total=value,
            deviation=None,
            accuracy=accuracy,
        )

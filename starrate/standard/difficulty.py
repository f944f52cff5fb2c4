from collections import namedtuple
import math

import numpy as np

from ..attributes import VERSION
from ..calculator import DifficultyCalculator
from ..game_mode import GameMode
from ..mod import Mod, ar_to_ms, clock_rate, od_to_ms
from ..skill import object_strains
from ..utils import inverse_difficulty_range, power_mean
from . import skills
from .objects import build_objects

DIFFICULTY_MULTIPLIER = 0.0668
PERFORMANCE_BASE_MULTIPLIER = 1.14

MECHANICAL_EXPONENT = 1.1
COGNITION_EXPONENT = 1.5

#: Mechanical performance below this is not worth memorising a chart for.
MEMORISATION_THRESHOLD = 25


class StandardDifficultyAttributes(namedtuple('StandardDifficultyAttributes', [
        'version',
        'mods',
        'star_rating',
        'max_combo',
        'aim_difficulty',
        'speed_difficulty',
        'flashlight_difficulty',
        'hidden_flashlight_difficulty',
        'reading_difficulty',
        'slider_factor',
        'speed_note_count',
        'approach_rate',
        'overall_difficulty',
        'drain_rate',
        'great_hit_window',
        'ok_hit_window',
        'meh_hit_window',
        'circle_count',
        'slider_count',
        'spinner_count',
])):
    """The difficulty of an osu! standard chart with a set of mods.

    ``approach_rate``, ``overall_difficulty`` and the hit windows are
    adjusted for the mods' playback rate; the windows are in real
    milliseconds either side of an object. ``hidden_flashlight_difficulty``
    is rated for every chart; it bounds the cognition rating by the
    difficulty of playing the chart fully from memory.
    """


def base_performance(rating):
    """The performance value of an aim or speed rating.
    """
    return (5 * max(1, rating / 0.0675) - 4) ** 3 / 100000


def cognition_performance(rating):
    """The performance value of a flashlight or reading rating.
    """
    return 25 * rating ** 2


def cognition_length_bonus(object_count):
    """Scale cognition performance up to full value over the first 400
    objects.
    """
    bonus = 0.7 + 0.1 * min(1.0, object_count / 200)
    if object_count > 200:
        bonus += 0.2 * min(1.0, (object_count - 200) / 200)
    return bonus


def perfect_flashlight_performance(rating, object_count):
    """The performance of playing a chart with hidden and flashlight
    entirely from memory.

    Parameters
    ----------
    rating : float
        The hidden flashlight rating.
    object_count : int
        The number of circles and sliders in the chart.

    Returns
    -------
    performance : float
        The performance value.
    """
    return cognition_performance(rating) * cognition_length_bonus(
        object_count,
    )


def adjust_cognition_performance(cognition, mechanical, perfect_flashlight):
    """Limit cognition performance by the difficulty of memorising the
    chart.

    A chart can be played from memory, so reading it can never be worth
    more than its mechanical difficulty plus the cost of memorising it.
    The limit is approached smoothly; small cognition values are almost
    unchanged.

    Parameters
    ----------
    cognition : float
        The combined flashlight and reading performance.
    mechanical : float
        The combined aim and speed performance.
    perfect_flashlight : float
        The performance of playing the chart with hidden and flashlight
        from memory, see :func:`perfect_flashlight_performance`.

    Returns
    -------
    cognition : float
        The limited cognition performance, never more than
        ``mechanical + perfect_flashlight + MEMORISATION_THRESHOLD``.
    """
    if cognition <= 0:
        return 0.0
    cap = mechanical + perfect_flashlight + MEMORISATION_THRESHOLD
    ratio = cognition / cap
    return cap * ratio / (1 + ratio ** 4) ** 0.25


def star_rating(performance):
    """Map a combined performance value onto the star rating scale.
    """
    if performance <= 1e-5:
        return 0.0
    return (
        PERFORMANCE_BASE_MULTIPLIER ** (1 / 3) *
        0.027 *
        (np.cbrt(100000 / 2 ** (1 / 1.1) * performance) + 4)
    )


def relevant_note_count(strains):
    """The number of notes weighted by how close their strain is to the
    hardest note's.
    """
    if not len(strains):
        return 0.0
    top = np.max(strains)
    if top == 0:
        return 0.0
    return float(np.sum(1 / (1 + np.exp(-(strains / top * 12 - 6)))))


class StandardDifficultyCalculator(DifficultyCalculator):
    """The osu! standard difficulty calculator.

    Aim and speed make up the mechanical part of the rating; flashlight and
    reading make up the cognitive part. Flashlight is only rated when the
    flashlight mod is enabled, and the cognitive part is limited by the
    hidden flashlight rating.
    """
    mode = GameMode.standard

    def build_objects(self, difficulty, clock_rate, *, cancellation=None):
        return build_objects(
            self.chart.hit_objects,
            difficulty,
            clock_rate,
            cancellation=cancellation,
        )

    def skills(self, mods, difficulty):
        hidden = bool(mods & Mod.hidden)
        out = [
            skills.aim(with_sliders=True),
            skills.aim(with_sliders=False),
            skills.speed(),
            skills.hidden_flashlight(),
            skills.reading(hidden=hidden),
        ]
        if mods & Mod.flashlight:
            out.append(skills.flashlight(hidden=hidden))
        return out

    def empty_attributes(self, mods):
        return self._attributes(
            mods,
            self.chart.difficulty.with_mods(mods, self.mode),
            clock_rate(mods),
            aim=0.0,
            speed=0.0,
            flashlight=0.0,
            hidden_flashlight=0.0,
            reading=0.0,
            slider_factor=1.0,
            speed_note_count=0.0,
            star_rating=0.0,
        )

    def create_attributes(self, mods, difficulty, clock_rate, objects, values):
        def rating(name):
            return math.sqrt(values.get(name, 0.0)) * DIFFICULTY_MULTIPLIER

        aim = rating('aim')
        aim_no_sliders = rating('aim (no sliders)')
        speed = rating('speed')
        flashlight = rating('flashlight')
        hidden_flashlight = rating('hidden flashlight')
        reading = rating('reading')

        slider_factor = aim_no_sliders / aim if aim > 0 else 1.0
        speed_note_count = relevant_note_count(
            object_strains(skills.speed(), objects),
        )

        if mods & Mod.touch_device:
            aim **= 0.8
            flashlight **= 0.8
            reading **= 0.9
        if mods & Mod.relax:
            aim *= 0.9
            speed = 0.0
            flashlight *= 0.7
            reading *= 0.95

        mechanical = power_mean(
            [base_performance(aim), base_performance(speed)],
            MECHANICAL_EXPONENT,
        )
        cognition = power_mean(
            [cognition_performance(flashlight),
             cognition_performance(reading)],
            COGNITION_EXPONENT,
        )
        chart = self.chart
        cognition = adjust_cognition_performance(
            cognition,
            mechanical,
            perfect_flashlight_performance(
                hidden_flashlight,
                chart.circle_count + chart.slider_count,
            ),
        )

        return self._attributes(
            mods,
            difficulty,
            clock_rate,
            aim=aim,
            speed=speed,
            flashlight=flashlight,
            hidden_flashlight=hidden_flashlight,
            reading=reading,
            slider_factor=slider_factor,
            speed_note_count=speed_note_count,
            star_rating=float(star_rating(mechanical + cognition)),
        )

    def _attributes(self,
                    mods,
                    difficulty,
                    clock_rate,
                    *,
                    aim,
                    speed,
                    flashlight,
                    hidden_flashlight,
                    reading,
                    slider_factor,
                    speed_note_count,
                    star_rating):
        chart = self.chart
        preempt = ar_to_ms(difficulty.approach_rate) / clock_rate
        windows = od_to_ms(difficulty.overall_difficulty, clock_rate)
        return StandardDifficultyAttributes(
            version=VERSION,
            mods=mods,
            star_rating=star_rating,
            max_combo=sum(ob.combo for ob in chart.hit_objects),
            aim_difficulty=aim,
            speed_difficulty=speed,
            flashlight_difficulty=flashlight,
            hidden_flashlight_difficulty=hidden_flashlight,
            reading_difficulty=reading,
            slider_factor=slider_factor,
            speed_note_count=speed_note_count,
            approach_rate=inverse_difficulty_range(preempt, 1800, 1200, 450),
            overall_difficulty=(80 - windows.hit_300) / 6,
            drain_rate=difficulty.hp_drain_rate,
            great_hit_window=windows.hit_300,
            ok_hit_window=windows.hit_100,
            meh_hit_window=windows.hit_50,
            circle_count=chart.circle_count,
            slider_count=chart.slider_count,
            spinner_count=chart.spinner_count,
        )

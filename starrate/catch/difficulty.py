from collections import namedtuple
import math

from ..attributes import VERSION
from ..calculator import DifficultyCalculator
from ..game_mode import GameMode
from ..hit_object import Circle, Slider, SliderTick
from ..mod import ar_to_ms, clock_rate
from ..utils import inverse_difficulty_range
from .movement import movement
from .objects import build_objects

STAR_SCALING_FACTOR = 0.153


class CatchDifficultyAttributes(namedtuple('CatchDifficultyAttributes', [
        'version',
        'mods',
        'star_rating',
        'max_combo',
        'approach_rate',
        'fruit_count',
        'droplet_count',
])):
    """The difficulty of an osu!catch chart with a set of mods.

    ``approach_rate`` is adjusted for the mods' playback rate.
    ``droplet_count`` counts every juice stream object other than the
    fruits at its ends and repeats.
    """


class CatchDifficultyCalculator(DifficultyCalculator):
    """The osu!catch difficulty calculator.
    """
    mode = GameMode.catch

    def build_objects(self, difficulty, clock_rate, *, cancellation=None):
        return build_objects(
            self.chart.hit_objects,
            difficulty.circle_size,
            clock_rate,
            cancellation=cancellation,
        )

    def skills(self, mods, difficulty):
        return [movement()]

    def empty_attributes(self, mods):
        return self._attributes(
            mods,
            self.chart.difficulty.with_mods(mods, self.mode),
            clock_rate(mods),
            0.0,
        )

    def create_attributes(self, mods, difficulty, clock_rate, objects, values):
        return self._attributes(
            mods,
            difficulty,
            clock_rate,
            math.sqrt(values['movement']) * STAR_SCALING_FACTOR,
        )

    def _attributes(self, mods, difficulty, clock_rate, star_rating):
        fruits = 0
        droplets = 0
        for hit_object in self.chart.hit_objects:
            if isinstance(hit_object, Circle):
                fruits += 1
            elif isinstance(hit_object, Slider):
                for nested in hit_object.nested_objects:
                    if isinstance(nested, SliderTick):
                        droplets += 1
                    else:
                        fruits += 1

        preempt = ar_to_ms(difficulty.approach_rate) / clock_rate
        return CatchDifficultyAttributes(
            version=VERSION,
            mods=mods,
            star_rating=star_rating,
            max_combo=fruits + droplets,
            approach_rate=inverse_difficulty_range(preempt, 1800, 1200, 450),
            fruit_count=fruits,
            droplet_count=droplets,
        )

from collections import namedtuple

from ..attributes import VERSION
from ..calculator import DifficultyCalculator
from ..game_mode import GameMode
from ..mod import od_to_mania_ms
from .objects import build_objects
from .strain import strain

STAR_SCALING_FACTOR = 0.018


class ManiaDifficultyAttributes(namedtuple('ManiaDifficultyAttributes', [
        'version',
        'mods',
        'star_rating',
        'max_combo',
        'overall_difficulty',
        'great_hit_window',
        'note_count',
        'hold_note_count',
        'is_convert',
])):
    """The difficulty of an osu!mania chart with a set of mods.

    ``overall_difficulty`` is the chart's own value; the mods' adjustments
    are applied to the hit windows instead. ``great_hit_window`` includes the
    playback rate. ``is_convert`` selects the osu!stable hit windows of
    converted charts under the classic mod.
    """


class ManiaDifficultyCalculator(DifficultyCalculator):
    """The osu!mania difficulty calculator.
    """
    mode = GameMode.mania

    def build_objects(self, difficulty, clock_rate, *, cancellation=None):
        return build_objects(
            self.chart.hit_objects,
            self.chart.key_count,
            clock_rate,
            cancellation=cancellation,
        )

    def skills(self, mods, difficulty):
        return [strain(self.chart.key_count)]

    def empty_attributes(self, mods):
        return self._attributes(mods, 0.0)

    def create_attributes(self, mods, difficulty, clock_rate, objects, values):
        return self._attributes(
            mods,
            values['strain'] * STAR_SCALING_FACTOR,
        )

    def _attributes(self, mods, star_rating):
        chart = self.chart
        od = chart.difficulty.overall_difficulty
        hold_note_count = chart.hold_note_count
        note_count = len(chart.hit_objects) - hold_note_count
        return ManiaDifficultyAttributes(
            version=VERSION,
            mods=mods,
            star_rating=star_rating,
            # hold notes are judged at the head and the tail
            max_combo=note_count + 2 * hold_note_count,
            overall_difficulty=od,
            great_hit_window=od_to_mania_ms(od, mods).great,
            note_count=note_count,
            hold_note_count=hold_note_count,
            is_convert=chart.is_convert,
        )

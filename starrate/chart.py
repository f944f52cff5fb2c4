from collections import namedtuple

from .game_mode import GameMode
from .hit_object import Circle, HoldNote, Slider, Spinner
from .mod import adjust_difficulty


class Difficulty(namedtuple('Difficulty', [
        'hp_drain_rate',
        'circle_size',
        'overall_difficulty',
        'approach_rate',
        'slider_multiplier',
        'slider_tick_rate',
])):
    """The chart-wide difficulty settings.

    Parameters
    ----------
    hp_drain_rate : float
        The HP drain rate.
    circle_size : float
        The circle size. In osu!mania this is the number of keys.
    overall_difficulty : float
        The overall difficulty, which sets the hit windows.
    approach_rate : float
        The approach rate.
    slider_multiplier : float, optional
        The base slider velocity.
    slider_tick_rate : float, optional
        The number of slider ticks per beat.
    """
    def __new__(cls,
                hp_drain_rate=5,
                circle_size=5,
                overall_difficulty=5,
                approach_rate=None,
                slider_multiplier=1.4,
                slider_tick_rate=1):
        if approach_rate is None:
            # old charts do not store an approach rate
            approach_rate = overall_difficulty
        return super().__new__(
            cls,
            hp_drain_rate,
            circle_size,
            overall_difficulty,
            approach_rate,
            slider_multiplier,
            slider_tick_rate,
        )

    def with_mods(self, mods, mode=GameMode.standard):
        """The difficulty settings after hard rock or easy.

        See :func:`starrate.mod.adjust_difficulty`.
        """
        return adjust_difficulty(self, mods, mode)


class Chart:
    """A chart handed to the calculators by an importer.

    Parameters
    ----------
    hit_objects : iterable[HitObject]
        The hit objects. They do not need to be sorted.
    difficulty : Difficulty, optional
        The chart-wide difficulty settings.
    mode : GameMode, optional
        The ruleset the chart is played in.
    title : str, optional
        A name to show in logs and reprs.
    is_convert : bool, optional
        Was the chart converted into its ruleset from an osu! standard
        chart? Converted osu!mania charts are judged with different hit
        windows under the classic mod.
    """
    def __init__(self,
                 hit_objects,
                 difficulty=None,
                 mode=GameMode.standard,
                 title=None,
                 is_convert=False):
        self.hit_objects = sorted(hit_objects, key=lambda ob: ob.start_ms)
        self.difficulty = Difficulty() if difficulty is None else difficulty
        self.mode = GameMode(mode)
        self.title = title
        self.is_convert = is_convert

    def __repr__(self):
        title = f' {self.title!r}' if self.title is not None else ''
        return (
            f'<{type(self).__qualname__}{title}: {self.mode.name},'
            f' {len(self.hit_objects)} objects>'
        )

    def _count(self, kind):
        return sum(isinstance(ob, kind) for ob in self.hit_objects)

    @property
    def circle_count(self):
        return self._count(Circle)

    @property
    def slider_count(self):
        return self._count(Slider)

    @property
    def spinner_count(self):
        return self._count(Spinner)

    @property
    def hold_note_count(self):
        return self._count(HoldNote)

    @property
    def key_count(self):
        """The number of osu!mania columns.
        """
        return max(1, int(round(self.difficulty.circle_size)))

    @property
    def duration(self):
        """The time in milliseconds from the first to the last object start.
        """
        if not self.hit_objects:
            return 0.0
        return self.hit_objects[-1].start_ms - self.hit_objects[0].start_ms

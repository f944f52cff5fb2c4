import logging

from .attributes import JudgementCounts
from .game_mode import GameMode
from .mod import Mod, clock_rate
from .skill import evaluate

log = logging.getLogger(__name__)


def _mod_names(mods):
    return '+'.join(Mod.names(mods)) or 'no mods'


class DifficultyCalculator:
    """Compute the difficulty attributes of a chart.

    Subclasses set :attr:`mode` and implement :meth:`build_objects`,
    :meth:`skills`, :meth:`create_attributes` and :meth:`empty_attributes`.

    Parameters
    ----------
    chart : Chart
        The chart to rate.
    """
    mode = None
    _by_mode = {}

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        if cls.mode is not None:
            DifficultyCalculator._by_mode[cls.mode] = cls

    def __init__(self, chart):
        self.chart = chart

    def __repr__(self):
        return f'<{type(self).__qualname__}: {self.chart!r}>'

    @classmethod
    def for_mode(cls, mode):
        """Look up the calculator for a ruleset.

        Parameters
        ----------
        mode : GameMode
            The ruleset.

        Returns
        -------
        calculator_type : type
            The :class:`DifficultyCalculator` subclass for ``mode``.
        """
        try:
            return cls._by_mode[GameMode(mode)]
        except KeyError:
            raise ValueError(f'no difficulty calculator for {mode!r}')

    def build_objects(self, difficulty, clock_rate, *, cancellation=None):
        raise NotImplementedError('build_objects')

    def skills(self, mods, difficulty):
        raise NotImplementedError('skills')

    def create_attributes(self, mods, difficulty, clock_rate, objects, values):
        raise NotImplementedError('create_attributes')

    def empty_attributes(self, mods):
        raise NotImplementedError('empty_attributes')

    def calculate(self, mods=0, *, cancellation=None):
        """Compute the difficulty attributes.

        Parameters
        ----------
        mods : int, optional
            The mod mask.
        cancellation : CancellationToken, optional
            Checked while building difficulty objects and evaluating skills.

        Returns
        -------
        attributes : namedtuple
            The ruleset's difficulty attributes. A chart without hit objects
            has a star rating of 0.

        Raises
        ------
        Cancelled
            Raised when ``cancellation`` is cancelled.
        """
        if not self.chart.hit_objects:
            log.debug('%r has no hit objects', self.chart)
            return self.empty_attributes(mods)

        rate = clock_rate(mods)
        difficulty = self.chart.difficulty.with_mods(mods, self.mode)
        objects = self.build_objects(
            difficulty,
            rate,
            cancellation=cancellation,
        )
        values = {
            skill.name: evaluate(skill, objects, cancellation=cancellation)
            for skill in self.skills(mods, difficulty)
        }
        attributes = self.create_attributes(
            mods,
            difficulty,
            rate,
            objects,
            values,
        )
        log.debug(
            '%r with %s: %.4f stars',
            self.chart,
            _mod_names(mods),
            attributes.star_rating,
        )
        return attributes


class PerformanceCalculator:
    """Compute the performance attributes of a play.

    Subclasses set :attr:`attributes_type` to the difficulty attributes they
    accept and implement :meth:`max_judgements` and :meth:`calculate`.

    Parameters
    ----------
    attributes : namedtuple
        The difficulty attributes of the chart, including the mods played.
    """
    attributes_type = None
    _by_attributes = {}

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        if cls.attributes_type is not None:
            PerformanceCalculator._by_attributes[cls.attributes_type] = cls

    def __init__(self, attributes):
        self.attributes = attributes

    def __repr__(self):
        return (
            f'<{type(self).__qualname__}:'
            f' {self.attributes.star_rating:.2f} stars,'
            f' {_mod_names(self.attributes.mods)}>'
        )

    @classmethod
    def for_attributes(cls, attributes):
        try:
            return cls._by_attributes[type(attributes)]
        except KeyError:
            raise ValueError(
                f'no performance calculator for {type(attributes).__name__}',
            )

    def max_judgements(self):
        """The most judgements a play of the chart can have.
        """
        raise NotImplementedError('max_judgements')

    def validate(self, counts):
        """Check that a play's judgement counts fit the chart.

        Parameters
        ----------
        counts : JudgementCounts
            The judgement counts.

        Raises
        ------
        ValueError
            Raised when there are more judgements than the chart has room
            for.
        """
        max_judgements = self.max_judgements()
        if counts.total > max_judgements:
            raise ValueError(
                f'{counts.total} judgements exceed the {max_judgements}'
                ' judgements available',
            )

    def calculate(self, counts, combo=None, *, cancellation=None):
        raise NotImplementedError('calculate')


def calculate_difficulty(chart, mods=0, cancellation=None):
    """Compute the difficulty attributes of a chart.

    Parameters
    ----------
    chart : Chart
        The chart.
    mods : int, optional
        The mod mask.
    cancellation : CancellationToken, optional
        Used to abort the calculation from another thread.

    Returns
    -------
    attributes : namedtuple
        The difficulty attributes for the chart's ruleset.
    """
    calculator = DifficultyCalculator.for_mode(chart.mode)(chart)
    return calculator.calculate(mods, cancellation=cancellation)


def calculate_performance(attributes, counts, combo=None, cancellation=None):
    """Compute the performance attributes of a play.

    Parameters
    ----------
    attributes : namedtuple
        The difficulty attributes of the chart with the mods played.
    counts : JudgementCounts or dict[str, int]
        The judgement counts of the play.
    combo : int, optional
        The highest combo reached. Defaults to a full combo.
    cancellation : CancellationToken, optional
        Used to abort the deviation estimate from another thread.

    Returns
    -------
    attributes : namedtuple
        The performance attributes for the chart's ruleset.

    Raises
    ------
    ValueError
        Raised when the counts are negative or exceed the chart.
    """
    if not isinstance(counts, JudgementCounts):
        counts = JudgementCounts(**counts)

    calculator = PerformanceCalculator.for_attributes(attributes)(attributes)
    calculator.validate(counts)
    return calculator.calculate(counts, combo, cancellation=cancellation)

"""Strain skills.

A skill turns the sequence of difficulty objects into a single difficulty
number. Each object contributes strain; strain decays exponentially with
time; the highest strain of every fixed-length section is recorded; and the
section peaks are combined into a weighted sum.

A :class:`Skill` is a plain value: a table of constants plus the function
computing one object's strain. All state lives in a
:class:`StrainAccumulator` which is folded over the objects by
:func:`step`, so evaluating a skill never mutates anything shared.
"""
from collections import namedtuple
import logging

import numpy as np

from .cancellation import check
from .utils import lerp

log = logging.getLogger(__name__)


class SkillConfig(namedtuple('SkillConfig', [
        'decay_base',
        'skill_multiplier',
        'section_length',
        'reduced_section_count',
        'reduced_strain_baseline',
        'decay_weight',
        'difficulty_multiplier',
])):
    """The tuning constants of a skill.

    Parameters
    ----------
    decay_base : float
        The fraction of strain left after one second.
    skill_multiplier : float
        The factor applied to each object's strain value.
    section_length : float, optional
        The length of a section in milliseconds.
    reduced_section_count : int, optional
        The number of highest peaks which are dampened.
    reduced_strain_baseline : float, optional
        The factor applied to the highest peak; later dampened peaks
        approach 1.
    decay_weight : float, optional
        The ratio between the weights of consecutive sorted peaks.
    difficulty_multiplier : float, optional
        The final scale applied to the weighted sum.
    """
    def __new__(cls,
                decay_base,
                skill_multiplier,
                section_length=400,
                reduced_section_count=10,
                reduced_strain_baseline=0.75,
                decay_weight=0.9,
                difficulty_multiplier=1.06):
        return super().__new__(
            cls,
            decay_base,
            skill_multiplier,
            section_length,
            reduced_section_count,
            reduced_strain_baseline,
            decay_weight,
            difficulty_multiplier,
        )


class Skill(namedtuple('Skill', [
        'name',
        'config',
        'strain_of',
        'initial_state',
        'rhythm_of',
        'initial_strain',
])):
    """A strain skill.

    Parameters
    ----------
    name : str
        The name of the skill.
    config : SkillConfig
        The skill's constants.
    strain_of : callable[[DifficultyObject, StrainAccumulator],
                         tuple[float, any]]
        Computes an object's strain value from the accumulator before the
        object. Returns the value and the new skill specific state.
    initial_state : any, optional
        The skill specific state before the first object.
    rhythm_of : callable[[DifficultyObject], float], optional
        A multiplicative bonus applied to the strain when recording peaks.
    initial_strain : callable[[StrainAccumulator, float], float], optional
        The strain at the start of a new section at the given time. Defaults
        to the current strain decayed to that time.
    """
    def __new__(cls,
                name,
                config,
                strain_of,
                initial_state=None,
                rhythm_of=None,
                initial_strain=None):
        return super().__new__(
            cls,
            name,
            config,
            strain_of,
            initial_state,
            rhythm_of,
            initial_strain,
        )


def stateless(evaluate):
    """Adapt a function of only the difficulty object into a strain function.

    Parameters
    ----------
    evaluate : callable[[DifficultyObject], float]
        The strain value of one object.

    Returns
    -------
    strain_of : callable[[DifficultyObject, StrainAccumulator],
                         tuple[float, any]]
        A strain function which passes the accumulator's state through.
    """
    def strain_of(obj, accumulator):
        return evaluate(obj), accumulator.state

    strain_of.__name__ = getattr(evaluate, '__name__', 'strain_of')
    return strain_of


class StrainAccumulator(namedtuple('StrainAccumulator', [
        'strain',
        'rhythm',
        'section_end',
        'section_peak',
        'previous_time',
        'state',
])):
    """The state of a skill between two difficulty objects.

    Parameters
    ----------
    strain : float
        The strain after the previous object.
    rhythm : float
        The previous object's rhythm bonus.
    section_end : float
        The end time of the current section.
    section_peak : float
        The highest strain seen in the current section.
    previous_time : float
        The start time of the previous object.
    state : any
        The skill specific state.
    """


def strain_decay(decay_base, ms):
    """The fraction of strain left after ``ms`` milliseconds.
    """
    return decay_base ** (ms / 1000)


def start(skill, origin):
    """The accumulator before the first difficulty object.

    Parameters
    ----------
    skill : Skill
        The skill.
    origin : float
        The time of the chart's first hit object; the first section starts
        here.

    Returns
    -------
    accumulator : StrainAccumulator
        The initial accumulator.
    """
    return StrainAccumulator(
        strain=0.0,
        rhythm=1.0,
        section_end=origin + skill.config.section_length,
        section_peak=0.0,
        previous_time=origin,
        state=skill.initial_state,
    )


def _initial_strain(skill, accumulator, time):
    if skill.initial_strain is not None:
        return skill.initial_strain(accumulator, time)

    return (
        accumulator.strain *
        accumulator.rhythm *
        strain_decay(
            skill.config.decay_base,
            time - accumulator.previous_time,
        )
    )


def step(skill, accumulator, obj):
    """Fold one difficulty object into the accumulator.

    Parameters
    ----------
    skill : Skill
        The skill.
    accumulator : StrainAccumulator
        The accumulator before ``obj``.
    obj : DifficultyObject
        The next difficulty object.

    Returns
    -------
    accumulator : StrainAccumulator
        The accumulator after ``obj``.
    peaks : list[float]
        The peaks of the sections which ended before ``obj``.
    """
    config = skill.config

    peaks = []
    section_end = accumulator.section_end
    section_peak = accumulator.section_peak
    while obj.start_time > section_end:
        peaks.append(section_peak)
        section_peak = _initial_strain(skill, accumulator, section_end)
        section_end += config.section_length

    value, state = skill.strain_of(obj, accumulator)
    strain = accumulator.strain * strain_decay(
        config.decay_base,
        obj.start_time - accumulator.previous_time,
    )
    strain += value * config.skill_multiplier

    rhythm = 1.0 if skill.rhythm_of is None else skill.rhythm_of(obj)

    return StrainAccumulator(
        strain=strain,
        rhythm=rhythm,
        section_end=section_end,
        section_peak=max(section_peak, strain * rhythm),
        previous_time=obj.start_time,
        state=state,
    ), peaks


def strain_peaks(skill, objects, *, cancellation=None):
    """Fold a skill over the difficulty objects.

    Parameters
    ----------
    skill : Skill
        The skill.
    objects : list[DifficultyObject]
        The difficulty objects in time order.
    cancellation : CancellationToken, optional
        Checked once per object.

    Returns
    -------
    peaks : list[float]
        The peak strain of every section, including the final partial
        section. Empty when there are no objects.
    """
    if not objects:
        return []

    first = objects[0]
    accumulator = start(skill, first.start_time - first.delta_time)

    peaks = []
    for obj in objects:
        check(cancellation)
        accumulator, flushed = step(skill, accumulator, obj)
        peaks.extend(flushed)

    peaks.append(accumulator.section_peak)
    return peaks


def object_strains(skill, objects):
    """The strain after each object, without sectioning.

    Parameters
    ----------
    skill : Skill
        The skill.
    objects : list[DifficultyObject]
        The difficulty objects in time order.

    Returns
    -------
    strains : np.ndarray[float]
        The strain, including the rhythm bonus, after each object.
    """
    if not objects:
        return np.zeros(0)

    first = objects[0]
    accumulator = start(skill, first.start_time - first.delta_time)
    out = np.empty(len(objects))
    for ix, obj in enumerate(objects):
        accumulator, _ = step(skill, accumulator, obj)
        out[ix] = accumulator.strain * accumulator.rhythm
    return out


def difficulty_value(peaks, config):
    """Combine section peaks into a difficulty value.

    Parameters
    ----------
    peaks : sequence[float]
        The section peaks.
    config : SkillConfig
        The skill's constants.

    Returns
    -------
    difficulty : float
        The weighted sum of the peaks. This is 0 for no peaks.

    Notes
    -----
    The ``reduced_section_count`` highest peaks are dampened by a factor
    which grows logarithmically from ``reduced_strain_baseline`` to 1 so a
    single spike does not dominate the result.
    """
    if not len(peaks):
        return 0.0

    strains = np.sort(np.asarray(peaks, dtype=float))[::-1]

    reduced = config.reduced_section_count
    count = min(len(strains), reduced)
    if count:
        ranks = np.arange(count)
        scale = np.log10(lerp(1, 10, np.clip(ranks / reduced, 0, 1)))
        strains[:count] *= lerp(config.reduced_strain_baseline, 1.0, scale)
        strains = np.sort(strains)[::-1]

    weights = config.decay_weight ** np.arange(len(strains))
    return max(0.0, float(np.sum(strains * weights)) *
               config.difficulty_multiplier)


def evaluate(skill, objects, *, cancellation=None):
    """Compute a skill's difficulty value.

    Parameters
    ----------
    skill : Skill
        The skill.
    objects : list[DifficultyObject]
        The difficulty objects in time order.
    cancellation : CancellationToken, optional
        Checked once per object.

    Returns
    -------
    difficulty : float
        The skill's difficulty value.
    """
    peaks = strain_peaks(skill, objects, cancellation=cancellation)
    value = difficulty_value(peaks, skill.config)
    log.debug(
        '%s: %d sections, difficulty value %g',
        skill.name,
        len(peaks),
        value,
    )
    return value

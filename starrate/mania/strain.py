"""The osu!mania strain skill.

Each note adds to the strain of its column and to a global strain shared by
all fingers. The skill reports the sum of the two directly, so the
accumulator neither decays nor scales it: the strain function returns the
difference from the current strain.
"""
from collections import namedtuple
import math

from ..skill import Skill, SkillConfig, strain_decay

INDIVIDUAL_DECAY_BASE = 0.125
GLOBAL_DECAY_BASE = 0.30
#: The release gap, in milliseconds, at which the release bonus is halved.
RELEASE_THRESHOLD = 24
#: Applied to everything while another note is held past this one's end.
HOLD_FACTOR = 1.25

STRAIN = SkillConfig(
    decay_base=1,
    skill_multiplier=1,
    section_length=400,
    reduced_section_count=0,
    decay_weight=0.9,
    difficulty_multiplier=1.0,
)


class ColumnState(namedtuple('ColumnState', [
        'start_times',
        'end_times',
        'column_strains',
        'previous_column_strain',
        'global_strain',
])):
    """The per column history of the strain skill.

    ``start_times``, ``end_times`` and ``column_strains`` hold one entry per
    column.
    """
    @classmethod
    def initial(cls, key_count):
        zeros = (0.0,) * key_count
        return cls(zeros, zeros, zeros, 0.0, 1.0)


def _definitely_bigger(a, b, tolerance=1):
    return a - tolerance > b


def _replace_at(values, ix, value):
    return values[:ix] + (value,) + values[ix + 1:]


def strain_of(current, accumulator):
    state = accumulator.state
    start_time = current.start_time
    end_time = current.end_time
    column = current.column

    hold_length = abs(end_time - start_time)
    # the closest release to this note's release
    closest_end_time = hold_length
    end_on_body_bias = 0.0
    end_after_tail_weight = 1.0

    is_end_on_body = False
    is_end_after_tail = False
    for previous_end in state.end_times:
        # another note is released while this one is held
        is_end_on_body |= (
            _definitely_bigger(previous_end, start_time) and
            _definitely_bigger(end_time, previous_end)
        )
        # another note is held past this one
        is_end_after_tail |= _definitely_bigger(previous_end, end_time)
        closest_end_time = min(closest_end_time, abs(end_time - previous_end))

    if is_end_on_body:
        end_on_body_bias = strain_release_bias(closest_end_time)
    if is_end_after_tail:
        end_after_tail_weight = HOLD_FACTOR

    column_strain = strain_decay(
        INDIVIDUAL_DECAY_BASE,
        start_time - state.start_times[column],
    ) * state.column_strains[column]
    column_strain += 2 * end_after_tail_weight

    global_strain = strain_decay(
        GLOBAL_DECAY_BASE,
        current.delta_time,
    ) * state.global_strain
    global_strain += (1 + end_on_body_bias) * end_after_tail_weight

    # every note of a chord sees the strongest column so far, so the chord's
    # strain does not depend on column order
    reported_column_strain = column_strain
    if current.delta_time <= 1:
        reported_column_strain = max(
            state.previous_column_strain,
            column_strain,
        )

    new_state = ColumnState(
        start_times=_replace_at(state.start_times, column, start_time),
        end_times=_replace_at(state.end_times, column, end_time),
        column_strains=_replace_at(
            state.column_strains,
            column,
            column_strain,
        ),
        previous_column_strain=reported_column_strain,
        global_strain=global_strain,
    )
    strain = reported_column_strain + global_strain
    return strain - accumulator.strain, new_state


def strain_release_bias(closest_end_time):
    """The bonus for releasing a hold close to another release.
    """
    return 1 / (1 + math.exp(0.5 * (RELEASE_THRESHOLD - closest_end_time)))


def initial_strain(accumulator, time):
    """Both strains decayed from the previous note to ``time``.
    """
    state = accumulator.state
    elapsed = time - accumulator.previous_time
    return (
        state.previous_column_strain *
        strain_decay(INDIVIDUAL_DECAY_BASE, elapsed) +
        state.global_strain * strain_decay(GLOBAL_DECAY_BASE, elapsed)
    )


def strain(key_count):
    """The strain skill for a chart with ``key_count`` columns.
    """
    return Skill(
        'strain',
        STRAIN,
        strain_of,
        initial_state=ColumnState.initial(key_count),
        initial_strain=initial_strain,
    )

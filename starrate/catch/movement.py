"""The osu!catch movement skill.
"""
from collections import namedtuple
import math

from ..skill import Skill, SkillConfig
from ..utils import clamp
from .objects import NORMALISED_HITOBJECT_RADIUS

ABSOLUTE_PLAYER_POSITIONING_ERROR = 16.0
DIRECTION_CHANGE_BONUS = 21.0
EDGE_DASH_BONUS = 5.7
#: Edge dashes are only rewarded within this distance of a hyper dash.
EDGE_DASH_THRESHOLD = 20.0

MOVEMENT = SkillConfig(
    decay_base=0.2,
    skill_multiplier=900,
    section_length=750,
    reduced_section_count=0,
    decay_weight=0.94,
    difficulty_multiplier=1.0,
)


class MovementState(namedtuple('MovementState', [
        'player_position',
        'distance_moved',
        'strain_time',
])):
    """Where the catcher was left by the previous object.
    """


def _sign(value):
    return (value > 0) - (value < 0)


def movement_strain(current, accumulator):
    """The movement strain value of an object.

    Parameters
    ----------
    current : CatchDifficultyObject
        The object.
    accumulator : StrainAccumulator
        The accumulator before ``current``; its state is a
        :class:`MovementState` or None before the first object.

    Returns
    -------
    strain : float
        The strain value.
    state : MovementState
        The catcher after ``current``.
    """
    state = accumulator.state
    if state is None:
        state = MovementState(current.last_normalised_position, 0.0, 0.0)

    catcher_speed = current.clock_rate
    reach = NORMALISED_HITOBJECT_RADIUS - ABSOLUTE_PLAYER_POSITIONING_ERROR
    player_position = clamp(
        state.player_position,
        current.normalised_position - reach,
        current.normalised_position + reach,
    )
    distance_moved = player_position - state.player_position

    weighted_strain_time = current.strain_time + 13 + 3 / catcher_speed

    distance_addition = abs(distance_moved) ** 1.3 / 510
    sqrt_strain = math.sqrt(weighted_strain_time)

    if abs(distance_moved) > 0.1:
        if (abs(state.distance_moved) > 0.1 and
                _sign(distance_moved) != _sign(state.distance_moved)):
            bonus_factor = min(50, abs(distance_moved)) / 50
            anti_flow_factor = max(
                min(70, abs(state.distance_moved)) / 70,
                0.38,
            )
            distance_addition += (
                DIRECTION_CHANGE_BONUS /
                math.sqrt(state.strain_time + 16) *
                bonus_factor *
                anti_flow_factor *
                max(1 - (weighted_strain_time / 1000) ** 3, 0)
            )

        # every movement gets a base bonus, which gives weight to streams
        distance_addition += (
            12.5 *
            min(abs(distance_moved), NORMALISED_HITOBJECT_RADIUS * 2) /
            (NORMALISED_HITOBJECT_RADIUS * 6) /
            sqrt_strain
        )

    last = current.last_object
    if last.distance_to_hyper_dash <= EDGE_DASH_THRESHOLD:
        edge_dash_bonus = 0.0
        if not last.hyper_dash:
            edge_dash_bonus += EDGE_DASH_BONUS
        else:
            # a hyper dash always lands in the right place
            player_position = current.normalised_position

        # edge dashes are easier at short intervals
        distance_addition *= 1.0 + edge_dash_bonus * (
            (EDGE_DASH_THRESHOLD - last.distance_to_hyper_dash) /
            EDGE_DASH_THRESHOLD
        ) * (min(current.strain_time * catcher_speed, 265) / 265) ** 1.5

    return (
        distance_addition / weighted_strain_time,
        MovementState(player_position, distance_moved, current.strain_time),
    )


def movement():
    return Skill('movement', MOVEMENT, movement_strain)

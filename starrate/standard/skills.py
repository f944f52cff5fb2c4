from functools import partial

from ..skill import Skill, SkillConfig, stateless
from . import evaluators

AIM = SkillConfig(decay_base=0.15, skill_multiplier=23.55)
SPEED = SkillConfig(decay_base=0.3, skill_multiplier=1375)
FLASHLIGHT = SkillConfig(
    decay_base=0.15,
    skill_multiplier=0.052,
    reduced_section_count=0,
    decay_weight=1.0,
)
READING = SkillConfig(decay_base=0.15, skill_multiplier=0.1)


def aim(with_sliders=True):
    """The aim skill.

    Parameters
    ----------
    with_sliders : bool, optional
        Reward following slider bodies?

    Returns
    -------
    skill : Skill
        The aim skill.
    """
    return Skill(
        'aim' if with_sliders else 'aim (no sliders)',
        AIM,
        stateless(partial(evaluators.aim, with_sliders=with_sliders)),
    )


def speed():
    return Skill(
        'speed',
        SPEED,
        stateless(evaluators.speed),
        rhythm_of=evaluators.rhythm,
    )


def flashlight(hidden=False):
    return Skill(
        'flashlight',
        FLASHLIGHT,
        stateless(partial(evaluators.flashlight, hidden=hidden)),
    )


def reading(hidden=False):
    return Skill(
        'reading',
        READING,
        stateless(partial(evaluators.reading, hidden=hidden)),
    )


def hidden_flashlight():
    """The flashlight skill as if hidden were also enabled.

    This is rated for every chart; it prices memorising the chart well
    enough to play it blind.
    """
    return Skill(
        'hidden flashlight',
        FLASHLIGHT,
        stateless(partial(evaluators.flashlight, hidden=True)),
    )

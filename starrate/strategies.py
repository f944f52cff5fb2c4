from datetime import timedelta

from hypothesis.strategies import (
    booleans,
    composite,
    floats as _floats,
    integers,
    lists,
    sampled_from,
)

from starrate import Chart, Circle, Difficulty, GameMode, HoldNote, Position
from starrate.attributes import JudgementCounts


def floats(*args, **kwargs):
    # NaN and infinity are not meaningful chart values
    return _floats(*args, allow_nan=False, allow_infinity=False, **kwargs)


@composite
def positions(draw):
    return Position(
        x=draw(integers(0, Position.x_max)),
        y=draw(integers(0, Position.y_max)),
    )


@composite
def difficulties(draw):
    return Difficulty(
        hp_drain_rate=draw(floats(0, 10)),
        circle_size=draw(floats(2, 7)),
        overall_difficulty=draw(floats(0, 10)),
        approach_rate=draw(floats(0, 10)),
    )


@composite
def circles(draw, *, min_time=0, max_time=60000):
    return Circle(
        position=draw(positions()),
        time=timedelta(milliseconds=draw(integers(min_time, max_time))),
        new_combo=draw(booleans()),
    )


@composite
def hold_notes(draw, *, min_time=0, max_time=60000):
    start = draw(integers(min_time, max_time))
    return HoldNote(
        position=draw(positions()),
        time=timedelta(milliseconds=start),
        end_time=timedelta(milliseconds=start + draw(integers(30, 2000))),
    )


@composite
def charts(draw, *, mode=None, min_size=0, max_size=40):
    """Charts of circles, plus hold notes in osu!mania.
    """
    if mode is None:
        mode = draw(sampled_from(GameMode))

    objects = circles()
    if mode == GameMode.mania:
        objects = circles() | hold_notes()

    difficulty = draw(difficulties())
    if mode == GameMode.mania:
        difficulty = difficulty._replace(circle_size=draw(integers(1, 9)))

    return Chart(
        draw(lists(objects, min_size=min_size, max_size=max_size)),
        difficulty,
        mode=mode,
    )


@composite
def judgement_counts(draw, *, max_value=2000):
    counts = integers(0, max_value)
    return JudgementCounts(
        perfect=draw(counts),
        great=draw(counts),
        good=draw(counts),
        ok=draw(counts),
        meh=draw(counts),
        miss=draw(counts),
    )

from datetime import timedelta

import pytest

from starrate import CancellationToken, Cancelled, Circle, Difficulty, Spinner
from starrate.difficulty_object import DifficultyObject, build
from starrate.mania.objects import build_objects as build_mania_objects
from starrate.standard.objects import build_objects as build_standard_objects


def ms(value):
    return timedelta(milliseconds=value)


def plain_object(hit_object, last, last_last, clock_rate, objects):
    return DifficultyObject(hit_object, last, clock_rate, objects)


def test_first_object_skipped():
    # plain numbers are times in milliseconds
    hit_objects = [Circle((0, 0), t) for t in (3000, 1000, 2000, 2010)]
    objects = build(hit_objects, 1.0, plain_object)

    assert len(objects) == 3
    assert [ob.start_time for ob in objects] == [2000, 2010, 3000]
    assert [ob.delta_time for ob in objects] == [1000, 10, 990]
    assert [ob.index for ob in objects] == [0, 1, 2]

    # the strain time has a floor
    assert objects[1].strain_time == DifficultyObject.min_strain_time


def test_neighbours():
    hit_objects = [Circle((0, 0), t) for t in range(0, 500, 100)]
    objects = build(hit_objects, 1.0, plain_object)

    assert objects[0].previous() is None
    assert objects[1].previous() is objects[0]
    assert objects[3].previous(2) is objects[0]
    assert objects[0].next() is objects[1]
    assert objects[0].next(2) is objects[3]
    assert objects[-1].next() is None


def test_clock_rate():
    hit_objects = [Circle((0, 0), ms(t)) for t in (0, 1500, 3000)]
    objects = build(hit_objects, 1.5, plain_object)

    assert [ob.start_time for ob in objects] == [1000, 2000]
    assert [ob.delta_time for ob in objects] == [1000, 1000]


def test_factory_may_skip():
    hit_objects = [Circle((0, 0), t) for t in range(0, 500, 100)]

    def every_other(hit_object, last, last_last, clock_rate, objects):
        if hit_object.start_ms % 200:
            return None
        return plain_object(hit_object, last, last_last, clock_rate, objects)

    objects = build(hit_objects, 1.0, every_other)
    assert [ob.start_time for ob in objects] == [200, 400]


def test_too_few_objects():
    assert build([], 1.0, plain_object) == []
    assert build([Circle((0, 0), ms(0))], 1.0, plain_object) == []


def test_cancellation():
    token = CancellationToken()
    token.cancel()
    assert token.cancelled

    hit_objects = [Circle((0, 0), t) for t in range(0, 500, 100)]
    with pytest.raises(Cancelled):
        build(hit_objects, 1.0, plain_object, cancellation=token)


def test_standard_distances():
    hit_objects = [
        Circle((0, 0), ms(1000)),
        Circle((100, 0), ms(1200)),
        Circle((100, 100), ms(1400)),
        Spinner((256, 192), ms(1600), ms(2600)),
        Circle((0, 0), ms(2800)),
    ]
    objects = build_standard_objects(
        hit_objects,
        Difficulty(circle_size=4),
        1.0,
    )

    # circle size 4 has a radius above 30 so no small circle bonus
    radius = objects[0].radius
    assert objects[0].lazy_jump_distance == pytest.approx(100 * 50 / radius)
    assert objects[0].angle is None

    # a right angle turn
    assert objects[1].angle == pytest.approx(3.141592653589793 / 2)

    # spinners and the objects after them have no distance
    assert objects[2].lazy_jump_distance == 0
    assert objects[3].lazy_jump_distance == 0


def test_mania_columns():
    # the chord is ordered by column
    hit_objects = [
        Circle((0, 192), ms(1000)),
        Circle((448, 192), ms(1200)),
        Circle((64, 192), ms(1200)),
    ]
    objects = build_mania_objects(hit_objects, 4, 1.0)
    assert [ob.column for ob in objects] == [0, 3]
    assert objects[1].delta_time == 0
    assert objects[1].strain_time == 0

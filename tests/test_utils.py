from datetime import timedelta
from math import isclose

import starrate.utils


def test_accuracy():
    assert starrate.utils.accuracy(1, 0, 0, 0) == 1.0
    assert round(starrate.utils.accuracy(0, 1, 0, 0), 4) == 0.3333
    assert round(starrate.utils.accuracy(0, 0, 1, 0), 4) == 0.1667
    assert starrate.utils.accuracy(0, 0, 0, 1) == 0.0
    assert round(starrate.utils.accuracy(982, 100, 43, 14), 4) == 0.8977
    assert starrate.utils.accuracy(0, 0, 0, 0) == 0.0


def test_to_ms():
    assert starrate.utils.to_ms(timedelta(seconds=1.5)) == 1500
    assert starrate.utils.to_ms(12) == 12.0


def test_difficulty_range():
    assert starrate.utils.difficulty_range(0, 1800, 1200, 450) == 1800
    assert starrate.utils.difficulty_range(5, 1800, 1200, 450) == 1200
    assert starrate.utils.difficulty_range(10, 1800, 1200, 450) == 450
    assert starrate.utils.difficulty_range(9, 1800, 1200, 450) == 600


def test_inverse_difficulty_range():
    for difficulty in (0, 2.5, 5, 7.5, 10, 11):
        value = starrate.utils.difficulty_range(difficulty, 1800, 1200, 450)
        assert isclose(
            starrate.utils.inverse_difficulty_range(value, 1800, 1200, 450),
            difficulty,
            abs_tol=1e-9,
        )


def test_power_mean():
    assert isclose(starrate.utils.power_mean([3, 4], 2), 5)
    assert starrate.utils.power_mean([0, 0], 1.1) == 0
    assert isclose(starrate.utils.power_mean([7], 1.5), 7)


def test_reverse_lerp():
    assert starrate.utils.reverse_lerp(5, 0, 10) == 0.5
    assert starrate.utils.reverse_lerp(-5, 0, 10) == 0
    assert starrate.utils.reverse_lerp(15, 0, 10) == 1
    assert starrate.utils.reverse_lerp(3, 2, 2) == 0


def test_lazyval():
    calls = []

    class C:
        @starrate.utils.lazyval
        def value(self):
            calls.append(1)
            return 4

    c = C()
    assert c.value == 4
    assert c.value == 4
    assert len(calls) == 1

    c.value = 5
    assert c.value == 5

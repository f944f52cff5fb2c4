from datetime import timedelta

import numpy as np
import pytest

from starrate import (
    Chart,
    Circle,
    Difficulty,
    JudgementCounts,
    Mod,
    Spinner,
    StandardDifficultyCalculator,
    calculate_difficulty,
    calculate_performance,
)
from starrate.example_data import example_chart
from starrate.standard import (
    StandardDifficultyAttributes,
    StandardPerformanceAttributes,
)
from starrate.standard.difficulty import (
    MECHANICAL_EXPONENT,
    MEMORISATION_THRESHOLD,
    adjust_cognition_performance,
    base_performance,
    perfect_flashlight_performance,
    relevant_note_count,
    star_rating,
)
from starrate.utils import power_mean


@pytest.fixture(scope='module')
def stream():
    return example_chart('stream')


@pytest.fixture(scope='module')
def jumps():
    return example_chart('jumps')


@pytest.fixture(scope='module')
def sliders():
    return example_chart('sliders')


def full_combo(attributes, ok=0, meh=0, miss=0):
    objects = (
        attributes.circle_count +
        attributes.slider_count +
        attributes.spinner_count
    )
    return JudgementCounts(
        great=objects - ok - meh - miss,
        ok=ok,
        meh=meh,
        miss=miss,
    )


def test_empty_chart():
    attributes = calculate_difficulty(Chart([]))
    assert isinstance(attributes, StandardDifficultyAttributes)
    assert attributes.star_rating == 0
    assert attributes.max_combo == 0
    assert attributes.aim_difficulty == 0
    assert attributes.slider_factor == 1

    performance = calculate_performance(attributes, JudgementCounts())
    assert performance.total == 0
    assert performance.deviation is None


def test_star_rating(stream, jumps):
    stream_attributes = calculate_difficulty(stream)
    jumps_attributes = calculate_difficulty(jumps)

    assert stream_attributes.star_rating > 0
    assert jumps_attributes.star_rating > 0
    assert stream_attributes.speed_difficulty > 0
    assert jumps_attributes.aim_difficulty > stream_attributes.aim_difficulty
    assert stream_attributes.speed_note_count > 0


def test_deterministic(sliders):
    first = calculate_difficulty(sliders, Mod.parse('HD'))
    second = StandardDifficultyCalculator(sliders).calculate(Mod.parse('HD'))
    assert first == second


def test_attributes(stream, sliders):
    attributes = calculate_difficulty(stream)
    assert attributes.version == 1
    assert attributes.mods == 0
    assert attributes.max_combo == 64
    assert attributes.circle_count == 64
    assert attributes.overall_difficulty == pytest.approx(8)
    assert attributes.approach_rate == pytest.approx(9)
    assert attributes.great_hit_window == pytest.approx(32)
    assert attributes.ok_hit_window == pytest.approx(76)
    assert attributes.meh_hit_window == pytest.approx(120)
    # without sliders both aim skills agree
    assert attributes.slider_factor == 1

    slider_attributes = calculate_difficulty(sliders)
    # heads, repeats and tails of the sliders plus the circles and spinner
    assert slider_attributes.max_combo == 49
    assert slider_attributes.slider_count == 12
    assert slider_attributes.spinner_count == 1
    assert slider_attributes.slider_factor > 0


def test_double_time(stream):
    normal = calculate_difficulty(stream)
    double_time = calculate_difficulty(stream, Mod.double_time)

    assert double_time.star_rating > normal.star_rating
    assert double_time.speed_difficulty > normal.speed_difficulty
    assert double_time.great_hit_window == pytest.approx(32 / 1.5)
    assert double_time.overall_difficulty == pytest.approx(
        (80 - 32 / 1.5) / 6,
    )
    assert double_time.approach_rate == pytest.approx(31 / 3)


def test_half_time(stream):
    normal = calculate_difficulty(stream)
    half_time = calculate_difficulty(stream, Mod.half_time)
    assert half_time.star_rating < normal.star_rating


def test_flashlight_needs_the_mod(jumps):
    assert calculate_difficulty(jumps).flashlight_difficulty == 0

    flashlight = calculate_difficulty(jumps, Mod.flashlight)
    assert flashlight.flashlight_difficulty > 0
    assert flashlight.star_rating > calculate_difficulty(jumps).star_rating


def test_relax(stream):
    normal = calculate_difficulty(stream)
    relax = calculate_difficulty(stream, Mod.relax)
    assert relax.speed_difficulty == 0
    assert relax.aim_difficulty == pytest.approx(normal.aim_difficulty * 0.9)
    assert relax.star_rating < normal.star_rating

    performance = calculate_performance(relax, full_combo(relax))
    assert performance.speed == 0


def test_touch_device_before_relax(stream):
    normal = calculate_difficulty(stream)
    both = calculate_difficulty(stream, Mod.touch_device | Mod.relax)
    assert both.aim_difficulty == pytest.approx(
        0.9 * normal.aim_difficulty ** 0.8,
    )


def test_hard_rock(jumps):
    hard_rock = calculate_difficulty(jumps, Mod.hard_rock)
    assert hard_rock.approach_rate == pytest.approx(10)
    assert hard_rock.overall_difficulty == pytest.approx(10)


def test_performance(sliders):
    attributes = calculate_difficulty(sliders)
    perfect = calculate_performance(attributes, full_combo(attributes))

    assert isinstance(perfect, StandardPerformanceAttributes)
    assert perfect.total > 0
    assert perfect.effective_miss_count == 0
    assert perfect.deviation is not None
    assert perfect.unstable_rate == pytest.approx(perfect.deviation * 10)

    missed = calculate_performance(
        attributes,
        full_combo(attributes, miss=2),
        combo=20,
    )
    assert missed.total < perfect.total
    assert missed.effective_miss_count >= 2

    inaccurate = calculate_performance(
        attributes,
        full_combo(attributes, ok=5, meh=2),
    )
    assert inaccurate.accuracy < perfect.accuracy
    assert inaccurate.deviation > perfect.deviation


def test_performance_counts_as_dict(stream):
    attributes = calculate_difficulty(stream)
    from_dict = calculate_performance(attributes, {'great': 60, 'ok': 4})
    from_counts = calculate_performance(
        attributes,
        JudgementCounts(great=60, ok=4),
    )
    assert from_dict == from_counts


def test_no_fail(stream):
    attributes = calculate_difficulty(stream)
    no_fail = calculate_difficulty(stream, Mod.no_fail)
    # no fail only costs performance when there are misses
    counts = full_combo(attributes, miss=10)
    assert (
        calculate_performance(no_fail, counts).total <
        calculate_performance(attributes, counts).total
    )


def test_too_many_judgements(stream):
    attributes = calculate_difficulty(stream)
    with pytest.raises(ValueError):
        calculate_performance(attributes, JudgementCounts(great=65))

    with pytest.raises(ValueError):
        calculate_performance(attributes, {'great': -1})


def test_star_rating_scale():
    assert star_rating(0) == 0
    assert star_rating(100) < star_rating(200)


def test_relevant_note_count():
    assert relevant_note_count(np.array([])) == 0
    assert relevant_note_count(np.zeros(2)) == 0
    # every note as hard as the hardest counts for slightly under one
    assert 2.9 < relevant_note_count(np.full(3, 5.0)) < 3


def test_spun_out_with_few_judgements():
    hit_objects = [
        Circle((100 + 50 * n, 192), timedelta(milliseconds=1000 + 200 * n))
        for n in range(4)
    ]
    hit_objects.extend(
        Spinner(
            (256, 192),
            timedelta(milliseconds=2000 + 1500 * n),
            timedelta(milliseconds=3000 + 1500 * n),
        )
        for n in range(5)
    )
    chart = Chart(hit_objects, Difficulty(overall_difficulty=8))
    attributes = calculate_difficulty(chart, Mod.spun_out | Mod.no_fail)
    assert attributes.spinner_count == 5

    # fewer judgements than spinners
    performance = calculate_performance(
        attributes,
        JudgementCounts(great=1),
    )
    assert performance.total == 0


def test_adjust_cognition_performance():
    assert adjust_cognition_performance(0, 100, 50) == 0

    cap = 100 + 50 + MEMORISATION_THRESHOLD
    # small values are nearly untouched
    assert adjust_cognition_performance(10, 100, 50) == pytest.approx(
        10,
        rel=1e-4,
    )
    values = [
        adjust_cognition_performance(cognition, 100, 50)
        for cognition in (50, 100, 200, 1000, 100000)
    ]
    assert values == sorted(values)
    assert all(value <= cap for value in values)
    assert values[-1] == pytest.approx(cap, rel=1e-6)


def test_hidden_flashlight_limits_cognition(jumps):
    nomod = calculate_difficulty(jumps)
    assert nomod.hidden_flashlight_difficulty > 0

    attributes = calculate_difficulty(jumps, Mod.hidden | Mod.flashlight)
    assert attributes.hidden_flashlight_difficulty == pytest.approx(
        nomod.hidden_flashlight_difficulty,
    )
    assert attributes.flashlight_difficulty > 0

    mechanical = power_mean(
        [base_performance(attributes.aim_difficulty),
         base_performance(attributes.speed_difficulty)],
        MECHANICAL_EXPONENT,
    )
    cap = (
        mechanical +
        perfect_flashlight_performance(
            attributes.hidden_flashlight_difficulty,
            attributes.circle_count + attributes.slider_count,
        ) +
        MEMORISATION_THRESHOLD
    )
    assert attributes.star_rating <= star_rating(mechanical + cap)

    performance = calculate_performance(attributes, full_combo(attributes))
    performance_cap = (
        power_mean(
            [performance.aim, performance.speed],
            MECHANICAL_EXPONENT,
        ) +
        perfect_flashlight_performance(
            attributes.hidden_flashlight_difficulty,
            attributes.circle_count + attributes.slider_count,
        ) +
        MEMORISATION_THRESHOLD
    )
    assert power_mean(
        [performance.flashlight, performance.reading],
        1.5,
    ) <= performance_cap * (1 + 1e-9)

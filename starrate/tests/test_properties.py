from hypothesis import given, settings

from starrate import GameMode, Mod, calculate_difficulty, calculate_performance
from starrate.attributes import JudgementCounts
from starrate.strategies import charts, judgement_counts


@given(charts())
@settings(report_multiple_bugs=False, deadline=None, max_examples=50)
def test_star_rating_is_finite_and_non_negative(chart):
    attributes = calculate_difficulty(chart)
    assert attributes.star_rating >= 0
    assert attributes.star_rating < float('inf')
    if not chart.hit_objects:
        assert attributes.star_rating == 0


@given(charts(mode=GameMode.mania, min_size=2))
@settings(report_multiple_bugs=False, deadline=None, max_examples=25)
def test_difficulty_is_deterministic(chart):
    mods = Mod.double_time
    assert calculate_difficulty(chart, mods) == calculate_difficulty(
        chart,
        mods,
    )


# at most 30 judgements always fit a chart of 30 or more objects
@given(
    charts(mode=GameMode.mania, min_size=30, max_size=40),
    judgement_counts(max_value=5),
)
@settings(report_multiple_bugs=False, deadline=None, max_examples=50)
def test_mania_performance(chart, counts):
    attributes = calculate_difficulty(chart)
    performance = calculate_performance(attributes, counts)
    assert performance.total >= 0
    if performance.deviation is None:
        assert performance.total == 0
    else:
        assert 0 < performance.deviation <= 10000


@given(charts(mode=GameMode.standard, min_size=1))
@settings(report_multiple_bugs=False, deadline=None, max_examples=25)
def test_standard_full_combo(chart):
    attributes = calculate_difficulty(chart)
    counts = JudgementCounts(great=len(chart.hit_objects))

    performance = calculate_performance(attributes, counts)
    assert performance.total >= 0
    assert performance.effective_miss_count == 0

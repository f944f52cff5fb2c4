from math import isclose, log, sqrt

import numpy as np
import pytest
from scipy.special import erfcinv

from starrate import CancellationToken, Cancelled, JudgementCounts, Mod
from starrate.deviation import (
    MAX_DEVIATION,
    category_log_probabilities,
    estimate,
    log_diff,
    log_erfc,
    log_outside,
    maximise,
    unstable_rate,
)
from starrate.mania.performance import (
    estimate_deviation as mania_deviation,
    log_hold_outside,
)
from starrate.mod import HitWindows, od_to_legacy_mania_ms, od_to_mania_ms
from starrate.standard.performance import (
    estimate_deviation as standard_deviation,
)


def all_perfect_deviation(perfect_window, count):
    """The most likely deviation of ``count`` perfect judgements and the half
    judgement of the pseudo-count.
    """
    return perfect_window / (sqrt(2) * erfcinv(1 / (2 * count + 1)))


def test_log_erfc():
    assert isclose(log_erfc(0), 0, abs_tol=1e-12)
    # stays finite where erfc underflows
    assert np.isfinite(log_erfc(40))
    assert log_erfc(40) < -1000


def test_log_diff():
    assert isclose(log_diff(0, log(0.5)), log(0.5))
    assert log_diff(1, 1) == -np.inf
    assert log_diff(1, 2) == -np.inf


def test_category_log_probabilities():
    log_p = category_log_probabilities([10, 20, 30], 15)
    assert len(log_p) == 4
    assert isclose(np.exp(log_p).sum(), 1)
    # the categories shrink away from the centre
    assert log_p[0] > log_p[1] > log_p[2]


def test_unstable_rate():
    assert unstable_rate(None) is None
    assert unstable_rate(4.5) == 45


def test_mania_all_perfect():
    count = 11847
    windows = od_to_mania_ms(7)
    deviation = mania_deviation(
        windows,
        count,
        0,
        JudgementCounts(perfect=count),
    )
    expected = all_perfect_deviation(windows.perfect, count)
    assert unstable_rate(deviation) == pytest.approx(
        unstable_rate(expected),
        abs=1e-3,
    )


def test_mania_double_time():
    counts = JudgementCounts(perfect=11847)
    normal = mania_deviation(od_to_mania_ms(7), 11847, 0, counts)
    double_time = mania_deviation(
        od_to_mania_ms(7, Mod.double_time),
        11847,
        0,
        counts,
    )
    assert double_time == pytest.approx(normal / 1.5, rel=1e-4)


@pytest.mark.parametrize('mods,expected', [
    (0, 448.951114),
    (Mod.double_time, 299.300747),
])
def test_mania_mixed_judgements(mods, expected):
    counts = JudgementCounts(
        perfect=5336,
        great=3886,
        good=1661,
        ok=445,
        meh=226,
        miss=293,
    )
    hold_notes = 700
    notes = counts.total - 2 * hold_notes
    assert notes + hold_notes == 11147

    deviation = mania_deviation(
        od_to_mania_ms(7, mods),
        notes,
        hold_notes,
        counts,
    )
    assert unstable_rate(deviation) == pytest.approx(expected, abs=1e-3)


def test_mania_mixed_judgements_depend_on_hold_notes():
    counts = JudgementCounts(
        perfect=5336,
        great=3886,
        good=1661,
        ok=445,
        meh=226,
        miss=293,
    )
    windows = od_to_mania_ms(7, Mod.double_time)
    notes_only = mania_deviation(windows, counts.total, 0, counts)
    with_holds = mania_deviation(windows, counts.total - 1400, 700, counts)
    assert unstable_rate(with_holds) == pytest.approx(299.300747, abs=1e-3)
    assert unstable_rate(notes_only) != pytest.approx(
        unstable_rate(with_holds),
        abs=1e-3,
    )


def test_mania_hold_notes():
    windows = od_to_mania_ms(8)
    counts = JudgementCounts(perfect=800, great=300, good=50, ok=10, miss=2)
    notes_only = mania_deviation(windows, counts.total, 0, counts)
    with_holds = mania_deviation(
        windows,
        counts.total - 200,
        100,
        counts,
    )
    assert 0 < notes_only <= MAX_DEVIATION
    assert 0 < with_holds <= MAX_DEVIATION
    assert with_holds != notes_only


def test_mania_accuracy_is_monotonic():
    windows = od_to_mania_ms(8)
    accurate = mania_deviation(
        windows,
        1000,
        0,
        JudgementCounts(perfect=900, great=100),
    )
    sloppy = mania_deviation(
        windows,
        1000,
        0,
        JudgementCounts(perfect=500, great=300, good=150, ok=50),
    )
    assert accurate < sloppy


@pytest.mark.parametrize('counts', [
    JudgementCounts(),
    JudgementCounts(perfect=1),
    JudgementCounts(miss=50),
])
def test_mania_unknown(counts):
    assert mania_deviation(od_to_mania_ms(7), 50, 0, counts) is None


def test_mania_without_heads():
    counts = JudgementCounts(perfect=10)
    assert mania_deviation(od_to_mania_ms(7), 0, 0, counts) is None


def test_mania_bounded():
    deviation = mania_deviation(
        od_to_mania_ms(7),
        1001,
        0,
        JudgementCounts(meh=1, miss=1000),
    )
    assert 0 < deviation <= MAX_DEVIATION


def test_standard_deviation():
    windows = HitWindows(32, 76, 120)
    accurate = standard_deviation(windows, JudgementCounts(great=990, ok=10))
    sloppy = standard_deviation(
        windows,
        JudgementCounts(great=800, ok=150, meh=30, miss=20),
    )
    perfect = standard_deviation(windows, JudgementCounts(great=1000))
    assert 0 < perfect < accurate < sloppy


@pytest.mark.parametrize('counts', [
    JudgementCounts(),
    JudgementCounts(great=1),
    JudgementCounts(miss=10),
])
def test_standard_unknown(counts):
    assert standard_deviation(HitWindows(32, 76, 120), counts) is None


def test_estimate():
    windows = [20, 50, 80]
    assert estimate(windows, [0, 0, 0, 1]) is None
    assert estimate(windows, [0, 0, 0, 10]) is None

    accurate = estimate(windows, [100, 5, 0, 0])
    sloppy = estimate(windows, [100, 40, 10, 2])
    assert 0 < accurate < sloppy

    with pytest.raises(ValueError):
        estimate(windows, [1, 2])


def test_cancellation():
    token = CancellationToken()
    token.cancel()

    with pytest.raises(Cancelled):
        maximise(lambda deviation: -deviation, cancellation=token)

    with pytest.raises(Cancelled):
        mania_deviation(
            od_to_mania_ms(7),
            100,
            0,
            JudgementCounts(perfect=90, great=10),
            cancellation=token,
        )


def test_log_hold_outside():
    windows = np.array([16.0, 40.0, 73.0, 103.0, 127.0])
    log_p = log_hold_outside(windows, 20, 36)
    assert np.all(log_p <= 0)
    # wider windows are missed less often
    assert np.all(np.diff(log_p) < 0)
    # both the head and the tail must land
    assert np.all(log_p >= log_outside(windows, 20))


def test_legacy_without_hold_notes():
    windows = od_to_legacy_mania_ms(8)
    counts = JudgementCounts(perfect=700, great=250, good=40, ok=8, miss=2)
    legacy = mania_deviation(windows, 1000, 0, counts, legacy=True)
    lazer = mania_deviation(windows, 1000, 0, counts)
    # without hold notes every judgement is a note either way
    assert legacy == pytest.approx(lazer, rel=1e-6)


def test_legacy_hold_notes():
    windows = od_to_legacy_mania_ms(8)
    counts = JudgementCounts(perfect=700, great=250, good=40, ok=8, miss=2)
    legacy = mania_deviation(windows, 800, 200, counts, legacy=True)
    lazer = mania_deviation(windows, 600, 200, counts)
    assert 0 < legacy <= MAX_DEVIATION
    assert legacy != pytest.approx(lazer, rel=1e-3)

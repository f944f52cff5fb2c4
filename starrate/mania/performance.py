from collections import namedtuple
import math

import numpy as np
from scipy.special import ndtr

from ..attributes import PerformanceAttributes
from ..calculator import PerformanceCalculator
from ..deviation import (
    categories_between,
    category_log_probabilities,
    log_diff,
    log_likelihood,
    log_outside,
    maximise,
    with_pseudo_count,
)
from ..mod import Mod, od_to_legacy_mania_ms, od_to_mania_ms
from .difficulty import ManiaDifficultyAttributes

#: Hold note tails have wider hit windows than notes.
TAIL_MULTIPLIER = 1.5
#: Players are less consistent releasing tails than hitting notes.
TAIL_DEVIATION_MULTIPLIER = 1.8
#: osu!stable widens the perfect and great windows of hold notes.
LEGACY_HOLD_MULTIPLIERS = np.array([1.2, 1.1, 1.0, 1.0, 1.0])


class ManiaPerformanceAttributes(PerformanceAttributes,
                                 namedtuple('ManiaPerformanceAttributes',
                                            'total deviation difficulty '
                                            'hit_windows')):
    """The performance of an osu!mania play.

    Parameters
    ----------
    total : float
        The performance points of the play.
    deviation : float or None
        The estimated hit error deviation in milliseconds.
    difficulty : float
        The star rating and accuracy component of ``total``.
    hit_windows : ManiaHitWindows
        The hit windows the play was judged with.
    """
    __slots__ = ()


def log_hold_outside(windows, head_deviation, tail_deviation):
    """The log probability that an osu!stable hold note misses each window.

    A stable hold note is judged on the sum of its head and tail errors.
    The head must land inside the window, and the tail inside twice the
    window less the head's expected error.

    Parameters
    ----------
    windows : np.ndarray[float]
        The hold note windows.
    head_deviation, tail_deviation : float
        The deviations of the head and tail hits.

    Returns
    -------
    log_p : np.ndarray[float]
        The log probability of missing each window.
    """
    log_head = log_outside(windows, head_deviation)

    # the expected distance of the head from the centre, given it landed
    # inside the window
    beta = windows / head_deviation
    inside = ndtr(beta) - 0.5
    expected = head_deviation * (
        (1 - np.exp(-beta ** 2 / 2)) / math.sqrt(2 * math.pi)
    ) / inside
    log_tail = log_outside(2 * windows - expected, tail_deviation)

    return log_diff(
        np.logaddexp(log_head, log_tail),
        log_head + log_tail,
    )


def estimate_deviation(windows,
                       note_count,
                       hold_note_count,
                       counts,
                       *,
                       legacy=False,
                       cancellation=None):
    """Estimate the hit error deviation of an osu!mania play.

    Notes and hold heads share the note hit windows. Hold tails have
    windows :data:`TAIL_MULTIPLIER` times wider and are hit with a deviation
    :data:`TAIL_DEVIATION_MULTIPLIER` times larger; the returned deviation is
    the combined deviation over both kinds of judgement.

    osu!stable judges a hold note once, on both its head and tail errors.
    With ``legacy``, notes are judged alone and each hold note is judged
    by :func:`log_hold_outside` against windows widened by
    :data:`LEGACY_HOLD_MULTIPLIERS`.

    Parameters
    ----------
    windows : ManiaHitWindows
        The mod adjusted note hit windows.
    note_count, hold_note_count : int
        The number of notes and hold notes in the chart.
    counts : JudgementCounts
        The play's judgements.
    legacy : bool, optional
        Judge hold notes the osu!stable way?
    cancellation : CancellationToken, optional
        Checked during the search.

    Returns
    -------
    deviation : float or None
        The deviation in milliseconds, or None when the play has at most one
        judgement or no hits.
    """
    judgements = np.array([
        counts.perfect,
        counts.great,
        counts.good,
        counts.ok,
        counts.meh,
        counts.miss,
    ], dtype=float)
    total = judgements.sum()
    if total <= 1 or not judgements[:-1].sum():
        return None
    if not note_count + hold_note_count:
        return None

    windows = np.array(windows, dtype=float)
    if legacy:
        heads = note_count
        hold_windows = windows * LEGACY_HOLD_MULTIPLIERS
    else:
        heads = note_count + hold_note_count
        hold_windows = windows * TAIL_MULTIPLIER
    tails = hold_note_count

    log_heads = math.log(heads) if heads else -np.inf
    log_tails = math.log(tails) if tails else -np.inf
    log_total = math.log(total)

    # the share of head and tail hits among every hit of the chart
    hits = note_count + 2 * hold_note_count
    head_share = (note_count + hold_note_count) / hits
    tail_share = hold_note_count / hits
    head_scale = math.sqrt(
        head_share + tail_share * TAIL_DEVIATION_MULTIPLIER ** 2,
    )

    weighted = with_pseudo_count(judgements)

    def likelihood(deviation):
        head_deviation = deviation / head_scale
        tail_deviation = head_deviation * TAIL_DEVIATION_MULTIPLIER
        if legacy:
            log_holds = categories_between(log_hold_outside(
                hold_windows,
                head_deviation,
                tail_deviation,
            ))
        else:
            log_holds = category_log_probabilities(
                hold_windows,
                tail_deviation,
            )
        log_p = np.logaddexp(
            category_log_probabilities(windows, head_deviation) + log_heads,
            log_holds + log_tails,
        ) - log_total
        return log_likelihood(weighted, log_p)

    return maximise(likelihood, cancellation=cancellation)


class ManiaPerformanceCalculator(PerformanceCalculator):
    """The osu!mania performance calculator.
    """
    attributes_type = ManiaDifficultyAttributes

    def max_judgements(self):
        return self.attributes.max_combo

    def calculate(self, counts, combo=None, *, cancellation=None):
        attributes = self.attributes
        mods = attributes.mods

        od = attributes.overall_difficulty
        # stable scores judge each hold note once
        legacy = bool(mods & Mod.classic) and counts.total <= (
            attributes.note_count + attributes.hold_note_count
        )
        if legacy:
            hit_windows = od_to_legacy_mania_ms(
                od,
                mods,
                attributes.is_convert,
            )
        else:
            hit_windows = od_to_mania_ms(od, mods)
        deviation = estimate_deviation(
            hit_windows,
            attributes.note_count,
            attributes.hold_note_count,
            counts,
            legacy=legacy,
            cancellation=cancellation,
        )

        # scales pp to be comparable across rulesets
        multiplier = 8.0
        if mods & Mod.no_fail:
            multiplier *= 0.75
        if mods & Mod.easy:
            multiplier *= 0.5

        difficulty = self._difficulty_value(deviation)
        return ManiaPerformanceAttributes(
            total=difficulty * multiplier,
            deviation=deviation,
            difficulty=difficulty,
            hit_windows=hit_windows,
        )

    def _difficulty_value(self, deviation):
        attributes = self.attributes
        if deviation is None:
            return 0.0

        objects = attributes.note_count + attributes.hold_note_count
        value = max(attributes.star_rating - 0.15, 0.05) ** 2.2 * (
            1 + 0.1 * min(1.0, objects / 1500)
        )
        unstable_rate = deviation * 10
        return value * max(1 - (unstable_rate / 500) ** 1.9, 0.0)

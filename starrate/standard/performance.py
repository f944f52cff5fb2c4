from collections import namedtuple
import math

from ..attributes import PerformanceAttributes
from ..calculator import PerformanceCalculator
from ..deviation import (
    category_log_probabilities,
    log_likelihood,
    maximise,
    with_pseudo_count,
)
from ..mod import HitWindows, Mod
from ..utils import accuracy, clamp, lerp, power_mean, reverse_lerp
from .difficulty import (
    COGNITION_EXPONENT,
    MECHANICAL_EXPONENT,
    PERFORMANCE_BASE_MULTIPLIER,
    StandardDifficultyAttributes,
    adjust_cognition_performance,
    base_performance,
    cognition_length_bonus,
    cognition_performance,
    perfect_flashlight_performance,
)

#: The share of sliders assumed hard enough to drop their ends.
DIFFICULT_SLIDER_SHARE = 0.15


class StandardPerformanceAttributes(PerformanceAttributes,
                                    namedtuple('StandardPerformanceAttributes',
                                               'total deviation aim speed '
                                               'accuracy flashlight reading '
                                               'effective_miss_count')):
    """The performance of an osu! standard play.

    Parameters
    ----------
    total : float
        The performance points of the play.
    deviation : float or None
        The estimated hit error deviation in milliseconds.
    aim, speed, accuracy, flashlight, reading : float
        The components summed into ``total``. ``flashlight`` and
        ``reading`` are limited by the cost of memorising the chart.
    effective_miss_count : float
        The misses plus the slider breaks implied by the combo.
    """
    __slots__ = ()


def estimate_deviation(windows, counts, *, cancellation=None):
    """Estimate the hit error deviation of a standard play.

    Only hits are timed: the great, ok and meh counts are fit to the
    distribution of errors given that the error is inside the meh window.

    Parameters
    ----------
    windows : HitWindows
        The rate adjusted hit windows.
    counts : JudgementCounts
        The play's judgements.
    cancellation : CancellationToken, optional
        Checked during the search.

    Returns
    -------
    deviation : float or None
        The deviation in milliseconds, or None when the play has at most one
        judgement or no hits.
    """
    hits = (counts.great, counts.ok, counts.meh)
    if sum(hits) + counts.miss <= 1 or not sum(hits):
        return None

    weighted = with_pseudo_count(hits)

    def likelihood(deviation):
        log_p = category_log_probabilities(windows, deviation)
        log_miss = log_p[-1]
        if log_miss >= 0:
            # nothing can be hit this far out
            return -1e10
        # condition on the object being hit
        log_hit = math.log(-math.expm1(log_miss))
        return log_likelihood(weighted, log_p[:-1] - log_hit)

    return maximise(likelihood, cancellation=cancellation)


class StandardPerformanceCalculator(PerformanceCalculator):
    """The osu! standard performance calculator.
    """
    attributes_type = StandardDifficultyAttributes

    def max_judgements(self):
        attributes = self.attributes
        return (
            attributes.circle_count +
            attributes.slider_count +
            attributes.spinner_count
        )

    def calculate(self, counts, combo=None, *, cancellation=None):
        attributes = self.attributes
        mods = attributes.mods

        self.counts = counts
        self.combo = attributes.max_combo if combo is None else combo
        self.total_hits = counts.great + counts.ok + counts.meh + counts.miss
        self.accuracy = accuracy(
            counts.great,
            counts.ok,
            counts.meh,
            counts.miss,
        )
        self.effective_miss_count = self._effective_miss_count()

        multiplier = PERFORMANCE_BASE_MULTIPLIER
        if mods & Mod.no_fail:
            multiplier *= max(0.90, 1.0 - 0.02 * self.effective_miss_count)
        if mods & Mod.spun_out and self.total_hits > 0:
            # a play can be judged on fewer objects than there are spinners
            multiplier *= max(0.0, 1.0 - (
                attributes.spinner_count / self.total_hits
            ) ** 0.85)
        if mods & Mod.relax:
            # relax only punishes misses, so treat inaccurate hits as misses
            od = attributes.overall_difficulty
            ok_multiplier = max(0.0, 1 - (od / 13.33) ** 1.8) if od > 0 else 1
            meh_multiplier = max(0.0, 1 - (od / 13.33) ** 5) if od > 0 else 1
            self.effective_miss_count = min(
                self.effective_miss_count +
                counts.ok * ok_multiplier +
                counts.meh * meh_multiplier,
                self.total_hits,
            )

        self.deviation = estimate_deviation(
            HitWindows(
                attributes.great_hit_window,
                attributes.ok_hit_window,
                attributes.meh_hit_window,
            ),
            counts,
            cancellation=cancellation,
        )

        aim = self._aim_value()
        speed = self._speed_value()
        accuracy_value = self._accuracy_value()
        flashlight = self._flashlight_value()
        reading = self._reading_value()

        cognition = power_mean([flashlight, reading], COGNITION_EXPONENT)
        if cognition > 0:
            scale = adjust_cognition_performance(
                cognition,
                power_mean([aim, speed], MECHANICAL_EXPONENT),
                perfect_flashlight_performance(
                    attributes.hidden_flashlight_difficulty,
                    attributes.circle_count + attributes.slider_count,
                ),
            ) / cognition
            flashlight *= scale
            reading *= scale

        total = power_mean(
            [aim, speed, accuracy_value, flashlight, reading],
            1.1,
        ) * multiplier

        return StandardPerformanceAttributes(
            total=total,
            deviation=self.deviation,
            aim=aim,
            speed=speed,
            accuracy=accuracy_value,
            flashlight=flashlight,
            reading=reading,
            effective_miss_count=self.effective_miss_count,
        )

    def _effective_miss_count(self):
        attributes = self.attributes
        counts = self.counts

        # guess the slider breaks from the combo
        combo_based_miss_count = 0.0
        if attributes.slider_count > 0:
            full_combo_threshold = (
                attributes.max_combo - 0.1 * attributes.slider_count
            )
            if self.combo < full_combo_threshold:
                combo_based_miss_count = (
                    full_combo_threshold / max(1, self.combo)
                )

        combo_based_miss_count = min(
            combo_based_miss_count,
            counts.ok + counts.meh + counts.miss,
        )
        return max(counts.miss, combo_based_miss_count)

    def _length_bonus(self):
        total_hits = self.total_hits
        bonus = 0.95 + 0.4 * min(1.0, total_hits / 2000)
        if total_hits > 2000:
            bonus += math.log10(total_hits / 2000) * 0.5
        return bonus

    def _miss_penalty(self, exponent):
        if self.effective_miss_count <= 0 or not self.total_hits:
            return 1.0
        return 0.97 * (
            1 - (self.effective_miss_count / self.total_hits) ** 0.775
        ) ** exponent

    def _combo_scaling(self):
        max_combo = self.attributes.max_combo
        if max_combo <= 0:
            return 1.0
        return min(self.combo ** 0.8 / max_combo ** 0.8, 1.0)

    def _aim_value(self):
        attributes = self.attributes
        mods = attributes.mods
        counts = self.counts
        ar = attributes.approach_rate

        value = base_performance(attributes.aim_difficulty)

        length_bonus = self._length_bonus()
        value *= length_bonus
        value *= self._miss_penalty(self.effective_miss_count)
        value *= self._combo_scaling()

        ar_factor = 0.0
        if ar > 10.33:
            ar_factor = 0.3 * (ar - 10.33)
        elif ar < 8.0:
            ar_factor = 0.05 * (8.0 - ar)
        if mods & Mod.relax:
            ar_factor = 0.0
        value *= 1.0 + ar_factor * length_bonus

        if mods & Mod.hidden:
            value *= 1.0 + 0.04 * (12.0 - ar)

        if attributes.slider_count > 0:
            difficult_sliders = (
                attributes.slider_count * DIFFICULT_SLIDER_SHARE
            )
            dropped_slider_ends = clamp(
                min(
                    counts.ok + counts.meh + counts.miss,
                    attributes.max_combo - self.combo,
                ),
                0,
                difficult_sliders,
            )
            slider_nerf = (
                (1 - attributes.slider_factor) *
                (1 - dropped_slider_ends / difficult_sliders) ** 3 +
                attributes.slider_factor
            )
            value *= slider_nerf

        value *= self.accuracy
        value *= 0.98 + attributes.overall_difficulty ** 2 / 2500
        return value

    def _speed_value(self):
        attributes = self.attributes
        mods = attributes.mods
        counts = self.counts
        if mods & Mod.relax:
            return 0.0

        od = attributes.overall_difficulty
        ar = attributes.approach_rate

        value = base_performance(attributes.speed_difficulty)

        length_bonus = self._length_bonus()
        value *= length_bonus
        value *= self._miss_penalty(self.effective_miss_count ** 0.875)
        value *= self._combo_scaling()

        ar_factor = 0.3 * (ar - 10.33) if ar > 10.33 else 0.0
        value *= 1.0 + ar_factor * length_bonus

        if mods & Mod.hidden:
            value *= 1.0 + 0.04 * (12.0 - ar)

        # only the accuracy on notes which are hard to tap matters
        speed_notes = attributes.speed_note_count
        other_notes = self.total_hits - speed_notes
        relevant_great = max(0.0, counts.great - other_notes)
        relevant_ok = max(
            0.0,
            counts.ok - max(0.0, other_notes - counts.great),
        )
        relevant_meh = max(
            0.0,
            counts.meh - max(0.0, other_notes - counts.great - counts.ok),
        )
        relevant_accuracy = 0.0
        if speed_notes > 0:
            relevant_accuracy = (
                relevant_great * 6.0 + relevant_ok * 2.0 + relevant_meh
            ) / (speed_notes * 6.0)

        value *= (0.95 + od ** 2 / 750) * (
            (self.accuracy + relevant_accuracy) / 2
        ) ** ((14.5 - max(od, 8)) / 2)

        if counts.meh >= self.total_hits / 500:
            value *= 0.99 ** (counts.meh - self.total_hits / 500.0)

        return value * self._speed_deviation_multiplier()

    def _speed_deviation_multiplier(self):
        """Scale down speed for plays too inaccurate to have really tapped
        the hardest notes.
        """
        deviation = self.deviation
        if deviation is None:
            return 1.0

        speed = base_performance(self.attributes.speed_difficulty)
        cutoff = 100 + 220 * (22 / deviation) ** 6.5
        if speed <= cutoff:
            return 1.0

        scale = 50
        adjusted = scale * (
            math.log((speed - cutoff) / scale + 1) + cutoff / scale
        )
        # fully nerf from a deviation of 27ms, not at all below 22ms
        adjusted = lerp(adjusted, speed, 1 - reverse_lerp(deviation, 22, 27))
        return adjusted / speed

    def _accuracy_value(self):
        attributes = self.attributes
        mods = attributes.mods
        counts = self.counts

        # sliders and spinners are always perfectly accurate
        timed_objects = attributes.circle_count
        better_accuracy = 0.0
        if timed_objects > 0:
            better_accuracy = max(0.0, (
                (counts.great - (self.total_hits - timed_objects)) * 6 +
                counts.ok * 2 +
                counts.meh
            ) / (timed_objects * 6))

        value = (
            1.52163 ** attributes.overall_difficulty *
            better_accuracy ** 24 *
            2.83
        )
        value *= min(1.15, (timed_objects / 1000) ** 0.3)

        if mods & Mod.hidden:
            value *= 1.08
        if mods & Mod.flashlight:
            value *= 1.02
        return value

    def _cognition_value(self, rating):
        value = cognition_performance(rating)
        value *= self._miss_penalty(self.effective_miss_count ** 0.875)
        value *= self._combo_scaling()

        value *= cognition_length_bonus(self.total_hits)

        value *= 0.5 + self.accuracy / 2
        value *= 0.98 + self.attributes.overall_difficulty ** 2 / 2500
        return value

    def _flashlight_value(self):
        if not self.attributes.mods & Mod.flashlight:
            return 0.0
        return self._cognition_value(self.attributes.flashlight_difficulty)

    def _reading_value(self):
        return self._cognition_value(self.attributes.reading_difficulty)

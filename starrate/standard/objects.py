from collections import namedtuple
import math

from ..difficulty_object import DifficultyObject, build
from ..hit_object import Slider, SliderRepeat, SliderTick, Spinner
from ..mod import ar_to_ms, circle_radius, fade_in_ms, od_to_ms_300
from ..position import distance
from ..utils import clamp

#: Distances are scaled so that every circle has this radius.
NORMALISED_RADIUS = 50
MIN_DELTA_TIME = 25

MAXIMUM_SLIDER_RADIUS = NORMALISED_RADIUS * 2.4
ASSUMED_SLIDER_RADIUS = NORMALISED_RADIUS * 1.8

#: The player may release a slider this many milliseconds before its end.
TAIL_LENIENCY = 36

#: Hidden fades objects out over this fraction of the preempt time.
FADE_OUT_DURATION_MULTIPLIER = 0.3


class LazyCursor(namedtuple('LazyCursor', 'end_position travel_distance '
                                          'travel_time')):
    """The shortest cursor movement which still follows a slider.

    Parameters
    ----------
    end_position : Position
        Where the cursor is when the slider can be released.
    travel_distance : float
        The normalised distance moved while following the slider.
    travel_time : float
        The milliseconds, at the original rate, spent following the
        slider.
    """


def lazy_cursor(slider, radius):
    """Follow a slider with the laziest possible cursor.

    Parameters
    ----------
    slider : Slider
        The slider.
    radius : float
        The circle radius in osu! pixels.

    Returns
    -------
    cursor : LazyCursor
        The lazy cursor movement.
    """
    duration = slider.end_ms - slider.start_ms
    tracking_end = max(
        slider.start_ms + duration - TAIL_LENIENCY,
        slider.start_ms + duration / 2,
    )
    nested = slider.nested_objects
    ticks = [ob for ob in nested if isinstance(ob, SliderTick)]
    if ticks and ticks[-1].start_ms > tracking_end:
        tracking_end = ticks[-1].start_ms

    travel_time = tracking_end - slider.start_ms

    if slider.span_duration > 0:
        progress = travel_time / slider.span_duration
    else:
        progress = 0.0
    if progress % 2 >= 1:
        progress = 1 - progress % 1
    else:
        progress %= 1

    lazy_end = slider.position_at(progress)
    cursor = slider.position
    travel_distance = 0.0
    scaling_factor = NORMALISED_RADIUS / radius

    last = len(nested) - 1
    for ix in range(1, len(nested)):
        movement_object = nested[ix]
        dx = movement_object.position.x - cursor.x
        dy = movement_object.position.y - cursor.y

        required_movement = ASSUMED_SLIDER_RADIUS
        if ix == last:
            # take the lazy end if it is closer than the real tail
            lazy_dx = lazy_end.x - cursor.x
            lazy_dy = lazy_end.y - cursor.y
            if math.hypot(lazy_dx, lazy_dy) < math.hypot(dx, dy):
                dx, dy = lazy_dx, lazy_dy
        elif isinstance(movement_object, SliderRepeat):
            required_movement = NORMALISED_RADIUS

        movement_length = scaling_factor * math.hypot(dx, dy)
        if movement_length > required_movement:
            fraction = (movement_length - required_movement) / movement_length
            cursor = cursor.offset(dx * fraction, dy * fraction)
            travel_distance += movement_length * fraction

        if ix == last:
            lazy_end = cursor

    return LazyCursor(lazy_end, travel_distance, travel_time)


class StandardDifficultyObject(DifficultyObject):
    """An osu! standard difficulty object.

    Parameters
    ----------
    hit_object : HitObject
        The object being wrapped.
    last_object : HitObject
        The previous hit object.
    last_last_object : HitObject or None
        The hit object before ``last_object``.
    clock_rate : float
        The playback rate.
    objects : list[DifficultyObject]
        The list this object is appended to.
    difficulty : Difficulty
        The mod adjusted difficulty settings.
    cursors : dict
        A cache of :class:`LazyCursor` by slider, shared by one build.

    Attributes
    ----------
    lazy_jump_distance : float
        The normalised distance from the previous object's lazy end.
    minimum_jump_distance : float
        The jump distance assuming the player cuts the previous slider
        short or follows it into this object, whichever is shorter.
    minimum_jump_time : float
        The time available for the minimum jump.
    travel_distance, travel_time : float
        The lazy travel of this slider; 0 and the strain floor for other
        objects.
    angle : float or None
        The angle in radians formed with the two previous objects.
    hit_window_great : float
        The full width of the 300 window at this rate.
    preempt, fade_in : float
        The unscaled approach and fade in times.
    """
    min_strain_time = MIN_DELTA_TIME

    def __init__(self,
                 hit_object,
                 last_object,
                 last_last_object,
                 clock_rate,
                 objects,
                 difficulty,
                 cursors):
        super().__init__(hit_object, last_object, clock_rate, objects)
        self.radius = circle_radius(difficulty.circle_size)
        self.preempt = ar_to_ms(difficulty.approach_rate)
        self.fade_in = fade_in_ms(self.preempt)
        self.hit_window_great = (
            2 * od_to_ms_300(difficulty.overall_difficulty) / clock_rate
        )

        self.lazy_jump_distance = 0.0
        self.minimum_jump_distance = 0.0
        self.minimum_jump_time = self.strain_time
        self.travel_distance = 0.0
        self.travel_time = MIN_DELTA_TIME
        self.angle = None

        self._cursors = cursors
        self._set_distances(last_object, last_last_object, clock_rate)

    def _cursor(self, slider):
        try:
            return self._cursors[id(slider)]
        except KeyError:
            cursor = self._cursors[id(slider)] = lazy_cursor(
                slider,
                self.radius,
            )
            return cursor

    def _end_cursor_position(self, hit_object):
        if isinstance(hit_object, Slider):
            return self._cursor(hit_object).end_position
        return hit_object.position

    def _set_distances(self, last_object, last_last_object, clock_rate):
        hit_object = self.hit_object
        if isinstance(hit_object, Slider):
            cursor = self._cursor(hit_object)
            # bonus for repeat sliders
            self.travel_distance = cursor.travel_distance * (
                1 + hit_object.repeat_count / 2.5
            ) ** (1 / 2.5)
            self.travel_time = max(
                cursor.travel_time / clock_rate,
                MIN_DELTA_TIME,
            )

        if isinstance(hit_object, Spinner) or isinstance(last_object, Spinner):
            return

        scaling_factor = NORMALISED_RADIUS / self.radius
        if self.radius < 30:
            small_circle_bonus = min(30 - self.radius, 5) / 50
            scaling_factor *= 1 + small_circle_bonus

        last_cursor_position = self._end_cursor_position(last_object)
        self.lazy_jump_distance = distance(
            hit_object.position.scaled(scaling_factor),
            last_cursor_position.scaled(scaling_factor),
        )
        self.minimum_jump_time = self.strain_time
        self.minimum_jump_distance = self.lazy_jump_distance

        if isinstance(last_object, Slider):
            last_travel_time = max(
                self._cursor(last_object).travel_time / clock_rate,
                MIN_DELTA_TIME,
            )
            self.minimum_jump_time = max(
                self.strain_time - last_travel_time,
                MIN_DELTA_TIME,
            )
            # the player either cuts the slider short or follows it through
            # to the tail, whichever is the shorter jump
            tail_jump_distance = distance(
                last_object.nested_objects[-1].position,
                hit_object.position,
            ) * scaling_factor
            self.minimum_jump_distance = max(0.0, min(
                self.lazy_jump_distance - (
                    MAXIMUM_SLIDER_RADIUS - ASSUMED_SLIDER_RADIUS
                ),
                tail_jump_distance - MAXIMUM_SLIDER_RADIUS,
            ))

        if (last_last_object is not None and
                not isinstance(last_last_object, Spinner)):
            last_last_cursor = self._end_cursor_position(last_last_object)
            v1 = (
                last_last_cursor.x - last_object.position.x,
                last_last_cursor.y - last_object.position.y,
            )
            v2 = (
                hit_object.position.x - last_cursor_position.x,
                hit_object.position.y - last_cursor_position.y,
            )
            dot = v1[0] * v2[0] + v1[1] * v2[1]
            det = v1[0] * v2[1] - v1[1] * v2[0]
            self.angle = abs(math.atan2(det, dot))

    def opacity_at(self, time, hidden):
        """The opacity of this object at an unscaled time.

        Parameters
        ----------
        time : float
            The time in milliseconds at the original rate.
        hidden : bool
            Is the hidden mod enabled?

        Returns
        -------
        opacity : float
            The opacity in the range [0, 1]. Objects are treated as invisible
            once their start time has passed.
        """
        start = self.hit_object.start_ms
        if time > start:
            return 0.0

        fade_in_start = start - self.preempt
        opacity = clamp((time - fade_in_start) / self.fade_in, 0.0, 1.0)
        if hidden:
            fade_out_start = fade_in_start + self.fade_in
            fade_out_duration = self.preempt * FADE_OUT_DURATION_MULTIPLIER
            opacity = min(
                opacity,
                1.0 - clamp(
                    (time - fade_out_start) / fade_out_duration,
                    0.0,
                    1.0,
                ),
            )
        return opacity

    @property
    def time_invisible(self):
        """The milliseconds, at the original rate, that this object spends
        hidden before it must be hit when the hidden mod is enabled.
        """
        fade_out_start = self.hit_object.start_ms - self.preempt + self.fade_in
        fade_out_duration = self.preempt * FADE_OUT_DURATION_MULTIPLIER
        fade_out_end = fade_out_start + fade_out_duration
        return self.hit_object.start_ms - fade_out_end


def build_objects(hit_objects, difficulty, clock_rate, *, cancellation=None):
    """Build the osu! standard difficulty objects.

    Parameters
    ----------
    hit_objects : iterable[HitObject]
        The chart's hit objects.
    difficulty : Difficulty
        The mod adjusted difficulty settings.
    clock_rate : float
        The playback rate.
    cancellation : CancellationToken, optional
        Checked once per hit object.

    Returns
    -------
    objects : list[StandardDifficultyObject]
        The difficulty objects.
    """
    cursors = {}

    def factory(hit_object, last, last_last, clock_rate, objects):
        return StandardDifficultyObject(
            hit_object,
            last,
            last_last,
            clock_rate,
            objects,
            difficulty,
            cursors,
        )

    return build(
        hit_objects,
        clock_rate,
        factory,
        cancellation=cancellation,
    )

"""The strain values of single osu! standard difficulty objects.

Every evaluator returns 0 for an object without the history it needs,
except :func:`rhythm` which is a multiplier and returns 1.
"""
import math

from ..hit_object import Slider, Spinner
from ..utils import clamp, logistic
from .objects import NORMALISED_RADIUS

# aim
WIDE_ANGLE_MULTIPLIER = 1.5
ACUTE_ANGLE_MULTIPLIER = 1.95
SLIDER_MULTIPLIER = 1.35
VELOCITY_CHANGE_MULTIPLIER = 0.75

# speed
SINGLE_SPACING_THRESHOLD = 125
MIN_SPEED_BONUS = 75
SPEED_BALANCING_FACTOR = 40

# rhythm
HISTORY_TIME_MAX = 5000
RHYTHM_MULTIPLIER = 0.75

# flashlight
MAX_OPACITY_BONUS = 0.4
HIDDEN_BONUS = 0.2
FLASHLIGHT_MIN_VELOCITY = 0.5
FLASHLIGHT_SLIDER_MULTIPLIER = 1.3

# reading
READING_WINDOW_SIZE = 3000


def _wide_angle_bonus(angle):
    return math.sin(
        3.0 / 4 * (min(5.0 / 6 * math.pi, max(math.pi / 6, angle)) -
                   math.pi / 6)
    ) ** 2


def _acute_angle_bonus(angle):
    return 1 - _wide_angle_bonus(angle)


def aim(current, with_sliders=True):
    """The aim strain value of an object.

    Parameters
    ----------
    current : StandardDifficultyObject
        The object.
    with_sliders : bool, optional
        Reward the movement needed to follow sliders?

    Returns
    -------
    strain : float
        The strain value.
    """
    last = current.previous(0)
    if (isinstance(current.hit_object, Spinner) or
            current.index <= 1 or
            isinstance(last.hit_object, Spinner)):
        return 0.0

    last_last = current.previous(1)

    # the base velocity is the jump distance over the time to make it
    curr_velocity = current.lazy_jump_distance / current.strain_time

    # sliders give the time and distance needed to travel the slider body
    if isinstance(last.hit_object, Slider) and with_sliders:
        travel_velocity = last.travel_distance / last.travel_time
        movement_velocity = (
            current.minimum_jump_distance / current.minimum_jump_time
        )
        curr_velocity = max(curr_velocity, movement_velocity + travel_velocity)

    prev_velocity = last.lazy_jump_distance / last.strain_time
    if isinstance(last_last.hit_object, Slider) and with_sliders:
        travel_velocity = last_last.travel_distance / last_last.travel_time
        movement_velocity = last.minimum_jump_distance / last.minimum_jump_time
        prev_velocity = max(prev_velocity, movement_velocity + travel_velocity)

    wide_angle_bonus = 0.0
    acute_angle_bonus = 0.0
    slider_bonus = 0.0
    velocity_change_bonus = 0.0

    strain = curr_velocity

    # angles only matter for a constant rhythm
    if (max(current.strain_time, last.strain_time) <
            1.25 * min(current.strain_time, last.strain_time)):
        if (current.angle is not None and
                last.angle is not None and
                last_last.angle is not None):
            curr_angle = current.angle
            last_angle = last.angle
            last_last_angle = last_last.angle

            angle_bonus = min(curr_velocity, prev_velocity)

            wide_angle_bonus = _wide_angle_bonus(curr_angle)
            acute_angle_bonus = _acute_angle_bonus(curr_angle)

            if current.strain_time > 100:
                # acute angles only matter above roughly 300 bpm 1/2
                acute_angle_bonus = 0.0
            else:
                acute_angle_bonus *= (
                    _acute_angle_bonus(last_angle) *
                    min(angle_bonus, 125 / current.strain_time) *
                    math.sin(
                        math.pi / 2 *
                        min(1, (100 - current.strain_time) / 25)
                    ) ** 2 *
                    math.sin(
                        math.pi / 2 *
                        (clamp(current.lazy_jump_distance, 50, 100) - 50) /
                        50
                    ) ** 2
                )

            # penalize angles repeated from the previous jump
            wide_angle_bonus *= angle_bonus * (
                1 - min(wide_angle_bonus, _wide_angle_bonus(last_angle) ** 3)
            )
            acute_angle_bonus *= 0.5 + 0.5 * (
                1 - min(
                    acute_angle_bonus,
                    _acute_angle_bonus(last_last_angle) ** 3,
                )
            )

    if max(prev_velocity, curr_velocity) != 0:
        # use the average velocity over the two jumps
        prev_velocity = (
            last.lazy_jump_distance + last_last.travel_distance
        ) / last.strain_time
        curr_velocity = (
            current.lazy_jump_distance + last.travel_distance
        ) / current.strain_time

        dist_ratio = math.sin(
            math.pi / 2 *
            abs(prev_velocity - curr_velocity) /
            max(prev_velocity, curr_velocity)
        ) ** 2

        # only reward changes between jumps which are not overlapping
        overlap_velocity_buff = min(
            NORMALISED_RADIUS * 2 /
            min(current.strain_time, last.strain_time),
            abs(prev_velocity - curr_velocity),
        )

        velocity_change_bonus = overlap_velocity_buff * dist_ratio

        # penalize changes in rhythm
        velocity_change_bonus *= (
            min(current.strain_time, last.strain_time) /
            max(current.strain_time, last.strain_time)
        ) ** 2

    if isinstance(last.hit_object, Slider):
        slider_bonus = last.travel_distance / last.travel_time

    strain += max(
        acute_angle_bonus * ACUTE_ANGLE_MULTIPLIER,
        wide_angle_bonus * WIDE_ANGLE_MULTIPLIER +
        velocity_change_bonus * VELOCITY_CHANGE_MULTIPLIER,
    )

    if with_sliders:
        strain += slider_bonus * SLIDER_MULTIPLIER

    return strain


def speed(current):
    """The speed strain value of an object: how fast and how far apart
    consecutive taps are.
    """
    if isinstance(current.hit_object, Spinner):
        return 0.0

    last = current.previous(0)
    following = current.next(0)

    strain_time = current.strain_time
    doubletapness = 1.0

    # nerf doubles which can be tapped as one
    if following is not None:
        curr_delta_time = max(1, current.delta_time)
        next_delta_time = max(1, following.delta_time)
        delta_difference = abs(next_delta_time - curr_delta_time)
        speed_ratio = curr_delta_time / max(curr_delta_time, delta_difference)
        window_ratio = min(1, curr_delta_time / current.hit_window_great) ** 2
        doubletapness = speed_ratio ** (1 - window_ratio)

    # cap the delta time at the 300 window
    strain_time /= clamp(
        (strain_time / current.hit_window_great) / 0.93,
        0.92,
        1,
    )

    speed_bonus = 1.0
    if strain_time < MIN_SPEED_BONUS:
        speed_bonus = 1 + 0.75 * (
            (MIN_SPEED_BONUS - strain_time) / SPEED_BALANCING_FACTOR
        ) ** 2

    travel_distance = last.travel_distance if last is not None else 0.0
    distance = min(
        SINGLE_SPACING_THRESHOLD,
        travel_distance + current.minimum_jump_distance,
    )

    return (
        (speed_bonus +
         speed_bonus * (distance / SINGLE_SPACING_THRESHOLD) ** 3.5) *
        doubletapness /
        strain_time
    )


def rhythm(current):
    """The rhythm complexity multiplier of an object.

    Changes of tempo between groups ("islands") of evenly spaced notes make
    a stream harder to tap accurately.

    Parameters
    ----------
    current : StandardDifficultyObject
        The object.

    Returns
    -------
    multiplier : float
        A multiplier of at least 1.
    """
    if isinstance(current.hit_object, Spinner):
        return 1.0

    previous_island_size = 0
    rhythm_complexity_sum = 0.0
    island_size = 1
    # the ratio at the start of the current island
    start_ratio = 0.0
    first_delta_switch = False

    historical_note_count = min(current.index, 32)

    rhythm_start = 0
    while (rhythm_start < historical_note_count - 2 and
           current.start_time - current.previous(rhythm_start).start_time <
           HISTORY_TIME_MAX):
        rhythm_start += 1

    for i in range(rhythm_start, 0, -1):
        curr = current.previous(i - 1)
        prev = current.previous(i)
        last = current.previous(i + 1)

        # scales older notes towards 0
        historical_decay = (
            HISTORY_TIME_MAX - (current.start_time - curr.start_time)
        ) / HISTORY_TIME_MAX
        historical_decay = min(
            (historical_note_count - i) / historical_note_count,
            historical_decay,
        )

        curr_delta = curr.strain_time
        prev_delta = prev.strain_time
        last_delta = last.strain_time

        curr_ratio = 1.0 + 6.0 * min(
            0.5,
            math.sin(
                math.pi /
                (min(prev_delta, curr_delta) / max(prev_delta, curr_delta))
            ) ** 2,
        )

        window_penalty = min(
            1,
            max(
                0,
                abs(prev_delta - curr_delta) - curr.hit_window_great * 0.6,
            ) / (curr.hit_window_great * 0.6),
        )

        effective_ratio = window_penalty * curr_ratio

        if first_delta_switch:
            if not (prev_delta > 1.25 * curr_delta or
                    prev_delta * 1.25 < curr_delta):
                # the island continues
                if island_size < 7:
                    island_size += 1
            else:
                if isinstance(curr.hit_object, Slider):
                    # changing into a slider is an easy accuracy window
                    effective_ratio *= 0.125
                if isinstance(prev.hit_object, Slider):
                    effective_ratio *= 0.25
                if previous_island_size == island_size:
                    # repeated island size, like triplet to triplet
                    effective_ratio *= 0.25
                if previous_island_size % 2 == island_size % 2:
                    # repeated island parity, like 2 to 4
                    effective_ratio *= 0.50
                if (last_delta > prev_delta + 10 and
                        prev_delta > curr_delta + 10):
                    # the previous speed up happened a note ago
                    effective_ratio *= 0.125

                rhythm_complexity_sum += (
                    math.sqrt(effective_ratio * start_ratio) *
                    historical_decay *
                    math.sqrt(4 + island_size) / 2 *
                    math.sqrt(4 + previous_island_size) / 2
                )

                start_ratio = effective_ratio
                previous_island_size = island_size

                if prev_delta * 1.25 < curr_delta:
                    # slowing down, stop counting
                    first_delta_switch = False

                island_size = 1

        elif prev_delta > 1.25 * curr_delta:
            # speeding up starts an island
            first_delta_switch = True
            start_ratio = effective_ratio
            island_size = 1

    return math.sqrt(4 + rhythm_complexity_sum * RHYTHM_MULTIPLIER) / 2


def flashlight(current, hidden=False):
    """The flashlight strain value of an object: how much of the recent
    pattern must be remembered rather than seen.

    Parameters
    ----------
    current : StandardDifficultyObject
        The object.
    hidden : bool, optional
        Is the hidden mod enabled?

    Returns
    -------
    strain : float
        The strain value.
    """
    if isinstance(current.hit_object, Spinner):
        return 0.0

    hit_object = current.hit_object
    scaling_factor = 52.0 / current.radius
    small_dist_nerf = 1.0
    cumulative_strain_time = 0.0
    result = 0.0

    last_obj = current
    for i in range(min(current.index, 10)):
        loop = current.previous(i)
        if not isinstance(loop.hit_object, Spinner):
            end_position = loop.hit_object.end_position
            jump_distance = math.hypot(
                hit_object.position.x - end_position.x,
                hit_object.position.y - end_position.y,
            )
            cumulative_strain_time += last_obj.strain_time

            if i == 0:
                # nerf objects which fit inside the flashlight radius
                small_dist_nerf = min(1.0, jump_distance / 75.0)

            # only the first object of a stack counts
            stack_nerf = min(
                1.0,
                (loop.lazy_jump_distance / scaling_factor) / 25.0,
            )

            opacity_bonus = 1.0 + MAX_OPACITY_BONUS * (
                1.0 - current.opacity_at(loop.hit_object.start_ms, hidden)
            )

            result += (
                stack_nerf *
                opacity_bonus *
                scaling_factor *
                jump_distance /
                cumulative_strain_time
            )

        last_obj = loop

    result = (small_dist_nerf * result) ** 2

    if hidden:
        result *= 1.0 + HIDDEN_BONUS

    slider_bonus = 0.0
    if isinstance(hit_object, Slider):
        pixel_travel_distance = current.travel_distance / scaling_factor
        slider_bonus = max(
            0.0,
            pixel_travel_distance / current.travel_time -
            FLASHLIGHT_MIN_VELOCITY,
        ) ** 0.5
        # longer sliders require more memorisation
        slider_bonus *= pixel_travel_distance
        if hit_object.repeat_count > 0:
            slider_bonus /= hit_object.repeat_count + 1

    return result + slider_bonus * FLASHLIGHT_SLIDER_MULTIPLIER


def _past_visible_objects(current):
    # objects already on screen when ``current`` appears
    for i in range(current.index):
        loop = current.previous(i)
        if (current.start_time - loop.start_time > READING_WINDOW_SIZE or
                loop.start_time < current.start_time -
                current.preempt / current.clock_rate):
            break
        yield loop


def _constant_angle_nerf(current):
    time_limit = 2000
    time_limit_low = 200

    constant_angle_count = 0.0
    index = 0
    time_gap = 0.0
    while time_gap < time_limit:
        loop = current.previous(index)
        if loop is None:
            break

        long_interval_factor = clamp(
            1 - (loop.strain_time - time_limit_low) /
            (time_limit - time_limit_low),
            0,
            1,
        )
        if loop.angle is not None and current.angle is not None:
            angle_difference = abs(current.angle - loop.angle)
            constant_angle_count += math.cos(
                4 * min(math.pi / 8, angle_difference)
            ) * long_interval_factor

        time_gap = current.start_time - loop.start_time
        index += 1

    if constant_angle_count <= 0:
        return 1.0
    return min(1, 2 / constant_angle_count) ** 2


def reading(current, hidden=False):
    """The reading strain value of an object: how many other objects are
    on screen and how confusing they are when this one appears.

    Parameters
    ----------
    current : StandardDifficultyObject
        The object.
    hidden : bool, optional
        Is the hidden mod enabled?

    Returns
    -------
    strain : float
        The strain value.
    """
    if isinstance(current.hit_object, Spinner) or current.index == 0:
        return 0.0

    velocity = current.lazy_jump_distance / current.strain_time

    past_influence = 1.0
    for loop in _past_visible_objects(current):
        loop_difficulty = current.opacity_at(loop.hit_object.start_ms, False)

        # objects close together can be played without reading them
        loop_difficulty *= logistic((loop.minimum_jump_distance - 80) / 15)

        time_between = current.start_time - loop.start_time
        loop_difficulty *= clamp(
            2 - time_between / (READING_WINDOW_SIZE / 2),
            0,
            1,
        )

        past_influence += loop_difficulty

    density_difficulty = (
        3 * math.log(max(1, past_influence - 1))
    ) ** 2.3

    hidden_difficulty = 0.0
    if hidden:
        time_invisible = current.time_invisible / current.clock_rate
        time_difficulty_factor = 800 / past_influence
        hidden_difficulty = (
            7 * time_invisible / time_difficulty_factor +
            2 * velocity
        )

    return (
        (hidden_difficulty + density_difficulty) *
        _constant_angle_nerf(current)
    )

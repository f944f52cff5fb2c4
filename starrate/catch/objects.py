"""osu!catch difficulty objects.

Only the ``x`` coordinate matters in osu!catch. Fruits are circles, the
droplets of a juice stream are its slider's nested objects, and banana
showers (spinners) are not caught for combo so they are skipped.
"""
from collections import namedtuple

from ..difficulty_object import DifficultyObject, build
from ..hit_object import Circle, Slider

#: The width of the catcher at circle size 0.
BASE_CATCHER_WIDTH = 106.75
#: The share of the catcher's width which can catch objects.
ALLOWED_CATCH_RANGE = 0.8
#: The catcher's dash speed in osu! pixels per millisecond.
BASE_DASH_SPEED = 1.0

NORMALISED_HITOBJECT_RADIUS = 41.0
MIN_STRAIN_TIME = 40


def catcher_width(circle_size):
    """The width of the part of the catcher which catches objects.
    """
    scale = 1.0 - 0.7 * (circle_size - 5) / 5
    return BASE_CATCHER_WIDTH * abs(scale) * ALLOWED_CATCH_RANGE


def half_catcher_width(circle_size):
    """The half width used to normalise movement distances.

    Very small catchers are made slightly smaller still, so movement on
    high circle sizes is worth a bit more.
    """
    half_width = catcher_width(circle_size) / 2
    return half_width * (1 - max(0.0, circle_size - 5.5) * 0.0625)


class Palpable(namedtuple('Palpable', [
        'hit_object',
        'x',
        'start_ms',
        'distance_to_hyper_dash',
        'hyper_dash',
])):
    """An object the catcher catches for combo.

    Parameters
    ----------
    hit_object : HitObject
        The fruit or juice stream droplet.
    x : float
        The horizontal position.
    start_ms : float
        When the object is caught.
    distance_to_hyper_dash : float
        How much further the catcher could have moved before reaching the
        next object would need a hyper dash.
    hyper_dash : bool
        Does reaching the next object need a hyper dash?
    """
    @property
    def end_ms(self):
        return self.start_ms


def palpable_objects(hit_objects):
    """The hit objects which are caught for combo, in time order.

    Parameters
    ----------
    hit_objects : iterable[HitObject]
        The chart's hit objects.

    Returns
    -------
    palpable : list[HitObject]
        The fruits and the nested objects of juice streams.
    """
    out = []
    for hit_object in hit_objects:
        if isinstance(hit_object, Circle):
            out.append(hit_object)
        elif isinstance(hit_object, Slider):
            out.extend(hit_object.nested_objects)
    out.sort(key=lambda ob: ob.start_ms)
    return out


def mark_hyper_dashes(hit_objects, circle_size):
    """Find the movements which need a hyper dash.

    Parameters
    ----------
    hit_objects : list[HitObject]
        The palpable objects in time order.
    circle_size : float
        The mod adjusted circle size.

    Returns
    -------
    palpable : list[Palpable]
        The objects annotated with their distance to a hyper dash.
    """
    # hyper dashes are judged against the full catcher, without the margins
    half_width = catcher_width(circle_size) / 2 / ALLOWED_CATCH_RANGE

    out = []
    last_direction = 0
    last_excess = half_width
    for current, following in zip(hit_objects, hit_objects[1:]):
        x = current.position.x
        next_x = following.position.x
        direction = 1 if next_x > x else -1

        # times are truncated to whole milliseconds with a quarter of a
        # frame of leniency
        time_to_next = (
            int(following.start_ms) - int(current.start_ms) - 1000 / 60 / 4
        )
        distance_to_next = abs(next_x - x) - (
            last_excess if last_direction == direction else half_width
        )
        distance_to_hyper = time_to_next * BASE_DASH_SPEED - distance_to_next

        if distance_to_hyper < 0:
            out.append(Palpable(current, x, current.start_ms, 0.0, True))
            last_excess = half_width
        else:
            out.append(Palpable(
                current,
                x,
                current.start_ms,
                distance_to_hyper,
                False,
            ))
            last_excess = min(max(distance_to_hyper, 0), half_width)

        last_direction = direction

    if hit_objects:
        last = hit_objects[-1]
        out.append(Palpable(last, last.position.x, last.start_ms, 0.0, False))
    return out


class CatchDifficultyObject(DifficultyObject):
    """An osu!catch difficulty object.

    Attributes
    ----------
    normalised_position : float
        The object's x scaled so the catcher's half width is
        :data:`NORMALISED_HITOBJECT_RADIUS`.
    last_normalised_position : float
        The previous object's normalised x.
    """
    min_strain_time = MIN_STRAIN_TIME

    def __init__(self,
                 palpable,
                 last_palpable,
                 clock_rate,
                 objects,
                 scaling_factor):
        super().__init__(palpable, last_palpable, clock_rate, objects)
        self.normalised_position = palpable.x * scaling_factor
        self.last_normalised_position = last_palpable.x * scaling_factor


def build_objects(hit_objects, circle_size, clock_rate, *, cancellation=None):
    """Build the osu!catch difficulty objects.

    Parameters
    ----------
    hit_objects : iterable[HitObject]
        The chart's hit objects.
    circle_size : float
        The mod adjusted circle size.
    clock_rate : float
        The playback rate.
    cancellation : CancellationToken, optional
        Checked once per object.

    Returns
    -------
    objects : list[CatchDifficultyObject]
        The difficulty objects. ``hit_object`` and ``last_object`` are
        :class:`Palpable` objects.
    """
    palpable = mark_hyper_dashes(palpable_objects(hit_objects), circle_size)
    scaling_factor = (
        NORMALISED_HITOBJECT_RADIUS / half_catcher_width(circle_size)
    )

    def factory(hit_object, last, last_last, clock_rate, objects):
        return CatchDifficultyObject(
            hit_object,
            last,
            clock_rate,
            objects,
            scaling_factor,
        )

    return build(palpable, clock_rate, factory, cancellation=cancellation)

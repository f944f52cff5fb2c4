import logging
import operator as op

from .cancellation import check

log = logging.getLogger(__name__)


class DifficultyObject:
    """A hit object with the timing information needed to compute strain.

    Parameters
    ----------
    hit_object : HitObject
        The object being wrapped.
    last_object : HitObject
        The hit object before ``hit_object``.
    clock_rate : float
        The playback rate.
    objects : list[DifficultyObject]
        The list this object is appended to. Neighbours are looked up by
        index into this list.

    Attributes
    ----------
    index : int
        The position of this object in ``objects``.
    start_time, end_time : float
        The rate-adjusted times in milliseconds.
    delta_time : float
        The rate-adjusted milliseconds since ``last_object`` started.
    strain_time : float
        ``delta_time`` floored at :attr:`min_strain_time`.
    """
    min_strain_time = 25

    def __init__(self, hit_object, last_object, clock_rate, objects):
        self.hit_object = hit_object
        self.last_object = last_object
        self.clock_rate = clock_rate
        self.index = len(objects)
        self._objects = objects

        self.start_time = hit_object.start_ms / clock_rate
        self.end_time = hit_object.end_ms / clock_rate
        self.delta_time = (
            hit_object.start_ms - last_object.start_ms
        ) / clock_rate
        self.strain_time = max(self.delta_time, self.min_strain_time)

    def __repr__(self):
        return (
            f'<{type(self).__qualname__} {self.index}:'
            f' {self.start_time:g}ms, dt={self.delta_time:g}ms>'
        )

    def previous(self, n=0):
        """The difficulty object ``n + 1`` places before this one, or None.
        """
        ix = self.index - (n + 1)
        if ix < 0:
            return None
        return self._objects[ix]

    def next(self, n=0):
        """The difficulty object ``n + 1`` places after this one, or None.
        """
        ix = self.index + n + 1
        if ix >= len(self._objects):
            return None
        return self._objects[ix]


def build(hit_objects, clock_rate, factory, *, cancellation=None):
    """Build the difficulty objects for a list of hit objects.

    Parameters
    ----------
    hit_objects : iterable[HitObject]
        The hit objects. They are sorted by start time; ties keep their
        given order.
    clock_rate : float
        The playback rate.
    factory : callable
        Called as ``factory(hit_object, last_object, last_last_object,
        clock_rate, objects)``; ``last_last_object`` is None for the second
        hit object. It returns the new difficulty object, or None to skip the
        hit object entirely.
    cancellation : CancellationToken, optional
        Checked once per hit object.

    Returns
    -------
    objects : list[DifficultyObject]
        One difficulty object per hit object except the first.
    """
    ordered = sorted(hit_objects, key=op.attrgetter('start_ms'))

    objects = []
    last_last = last = None
    for hit_object in ordered:
        check(cancellation)
        if last is not None:
            difficulty_object = factory(
                hit_object,
                last,
                last_last,
                clock_rate,
                objects,
            )
            if difficulty_object is None:
                continue
            objects.append(difficulty_object)

        last_last = last
        last = hit_object

    log.debug(
        'built %d difficulty objects from %d hit objects at rate %g',
        len(objects),
        len(ordered),
        clock_rate,
    )
    return objects

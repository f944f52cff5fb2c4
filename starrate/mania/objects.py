from ..difficulty_object import DifficultyObject, build
from ..hit_object import column_of


class ManiaDifficultyObject(DifficultyObject):
    """An osu!mania difficulty object.

    ``delta_time`` is used directly; notes in a chord have a delta of 0.

    Attributes
    ----------
    column : int
        The column of the note.
    """
    min_strain_time = 0

    def __init__(self, hit_object, last_object, clock_rate, objects, column):
        super().__init__(hit_object, last_object, clock_rate, objects)
        self.column = column


def build_objects(hit_objects, key_count, clock_rate, *, cancellation=None):
    """Build the osu!mania difficulty objects.

    Parameters
    ----------
    hit_objects : iterable[HitObject]
        The chart's notes and hold notes.
    key_count : int
        The number of columns.
    clock_rate : float
        The playback rate.
    cancellation : CancellationToken, optional
        Checked once per object.

    Returns
    -------
    objects : list[ManiaDifficultyObject]
        The difficulty objects, ordered by start time and then column.
    """
    ordered = sorted(
        hit_objects,
        key=lambda ob: (ob.start_ms, column_of(ob, key_count)),
    )

    def factory(hit_object, last, last_last, clock_rate, objects):
        return ManiaDifficultyObject(
            hit_object,
            last,
            clock_rate,
            objects,
            column_of(hit_object, key_count),
        )

    return build(ordered, clock_rate, factory, cancellation=cancellation)

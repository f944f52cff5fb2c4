from datetime import timedelta
import math

from .curve import Linear
from .position import Position
from .utils import lazyval, to_ms


class HitObject:
    """An abstract hit element.

    Parameters
    ----------
    position : Position
        Where this element appears on the screen.
    time : timedelta
        When this element appears in the map.
    new_combo : bool, optional
        Does this element start a new combo?

    Notes
    -----
    Hit objects are treated as immutable once they are handed to a
    calculator.
    """
    def __init__(self, position, time, new_combo=False):
        self.position = Position(*position)
        self.time = time
        self.new_combo = new_combo

    def __repr__(self):
        return (
            f'<{type(self).__qualname__}: {self.position},'
            f' {self.start_ms:g}ms>'
        )

    @property
    def end_time(self):
        return self.time

    @lazyval
    def start_ms(self):
        """The start time in milliseconds.
        """
        return to_ms(self.time)

    @lazyval
    def end_ms(self):
        """The end time in milliseconds.
        """
        return to_ms(self.end_time)

    @property
    def end_position(self):
        return self.position

    @property
    def combo(self):
        """The number of combo this element is worth in osu! standard.
        """
        return 1


class Circle(HitObject):
    """A circle hit element.

    In osu!catch a circle is a fruit and in osu!mania it is a note.
    """


class Spinner(HitObject):
    """A spinner hit element

    Parameters
    ----------
    position : Position
        Where this spinner appears on the screen.
    time : timedelta
        When this spinner appears in the map.
    end_time : timedelta
        When this spinner ends in the map.
    """
    def __init__(self, position, time, end_time, new_combo=False):
        super().__init__(position, time, new_combo)
        self._end_time = end_time

    @property
    def end_time(self):
        return self._end_time


class HoldNote(HitObject):
    """A HoldNote hit element.

    Parameters
    ----------
    position : Position
        Where this HoldNote appears on the screen. Only ``x`` is used; it
        selects the column.
    time : timedelta
        When this HoldNote appears in the map.
    end_time : timedelta
        When this HoldNote must be released.

    Notes
    -----
    A ``HoldNote`` can only appear in an osu!mania map.
    """
    def __init__(self, position, time, end_time, new_combo=False):
        super().__init__(position, time, new_combo)
        self._end_time = end_time

    @property
    def end_time(self):
        return self._end_time


def column_of(hit_object, key_count):
    """The osu!mania column of an element.

    Parameters
    ----------
    hit_object : HitObject
        The element.
    key_count : int
        The number of columns.

    Returns
    -------
    column : int
        The column in ``[0, key_count)``.
    """
    column = math.floor(hit_object.position.x * key_count / Position.x_max)
    return min(max(column, 0), key_count - 1)


class SliderHead(HitObject):
    """The head circle of a slider.
    """


class SliderTick(HitObject):
    """A tick along a slider's body.
    """


class SliderRepeat(HitObject):
    """The point where a slider reverses.
    """


class SliderTail(HitObject):
    """The end of a slider.
    """


class Slider(HitObject):
    """A slider hit element.

    Parameters
    ----------
    position : Position
        Where this slider appears on the screen.
    time : timedelta
        When this slider appears in the map.
    end_time : timedelta
        When this slider ends in the map
    curve : Curve, optional
        The slider's curve function. Defaults to a slider which does not
        move.
    repeat : int, optional
        The number of spans, so a slider which does not reverse has
        ``repeat=1``.
    length : float, optional
        The length of this slider in osu! pixels.
    nested_objects : list[HitObject], optional
        The head, ticks, repeats and tail of this slider as generated by the
        chart's importer. When not given, the head, repeats and tail are
        derived from the curve and no ticks are created.
    new_combo : bool, optional
        Does this element start a new combo?
    """
    def __init__(self,
                 position,
                 time,
                 end_time,
                 curve=None,
                 repeat=1,
                 length=None,
                 nested_objects=None,
                 new_combo=False):
        super().__init__(position, time, new_combo)
        if repeat < 1:
            raise ValueError(f'a slider needs at least one span, got {repeat}')

        self._end_time = end_time
        self.curve = Linear([position]) if curve is None else curve
        self.repeat = repeat
        self.length = length
        if nested_objects is not None:
            self.nested_objects = sorted(
                nested_objects,
                key=lambda ob: ob.start_ms,
            )

    @property
    def end_time(self):
        return self._end_time

    @property
    def repeat_count(self):
        """The number of times this slider reverses.
        """
        return self.repeat - 1

    @lazyval
    def span_duration(self):
        """The length of one span in milliseconds.
        """
        return (self.end_ms - self.start_ms) / self.repeat

    def position_at(self, progress):
        """The position along the curve, ignoring repeats.

        Parameters
        ----------
        progress : float
            The progress along the curve in the range [0, 1].

        Returns
        -------
        position : Position
            The position of the slider ball.
        """
        return self.curve(progress)

    def _span_end_position(self, span):
        return self.position_at(1 if span % 2 else 0)

    @property
    def end_position(self):
        return self._span_end_position(self.repeat)

    @lazyval
    def nested_objects(self):
        nested = [SliderHead(self.position, self.time)]
        for span in range(1, self.repeat):
            offset = self.span_duration * span
            if isinstance(self.time, timedelta):
                offset = timedelta(milliseconds=offset)
            nested.append(SliderRepeat(
                self._span_end_position(span),
                self.time + offset,
            ))
        nested.append(SliderTail(self.end_position, self.end_time))
        return nested

    @property
    def combo(self):
        return len(self.nested_objects)

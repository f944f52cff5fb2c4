from abc import ABCMeta, abstractmethod
import math

import numpy as np
from scipy.special import comb

from .position import Position
from .utils import clamp, lazyval


class Curve(metaclass=ABCMeta):
    """The path followed by a slider.

    Parameters
    ----------
    points : list[Position]
        The control points of the curve, starting with the slider's head.
    req_length : float, optional
        The length of the slider in osu! pixels. The curve is truncated, or
        its final segment extended, to this length. Defaults to the natural
        length of the curve.
    """
    _kind_dispatch = {}
    kinds = ()

    @classmethod
    def from_kind_and_points(cls, kind, points, req_length=None):
        """Construct the curve for a curve kind code.

        Parameters
        ----------
        kind : str
            ``'L'`` for linear, ``'P'`` for a perfect circle and ``'B'`` for
            bezier curves.
        points : list[Position]
            The control points.
        req_length : float, optional
            The requested length.

        Returns
        -------
        curve : Curve
            The curve.
        """
        try:
            subcls = cls._kind_dispatch[kind]
        except KeyError:
            raise ValueError(f'unknown curve type: {kind!r}')

        return subcls(points, req_length)

    def __init_subclass__(cls):
        for kind in cls.kinds:
            cls._kind_dispatch[kind] = cls

    @abstractmethod
    def __call__(self, t):
        """Compute the position of the curve at time ``t``.

        Parameters
        ----------
        t : float
            The time along the distance of the curve in the range [0, 1]

        Returns
        -------
        position : Position
            The position of the curve.
        """
        raise NotImplementedError('__call__')


class _SampledCurve(Curve):
    """A curve approximated by a polyline through sampled points.
    """
    def __init__(self, points, req_length=None):
        if not points:
            raise ValueError('a curve needs at least one point')
        self.points = [Position(*p) for p in points]
        self.req_length = req_length

    @abstractmethod
    def _sample(self):
        raise NotImplementedError('_sample')

    @lazyval
    def _samples(self):
        return np.asarray(self._sample(), dtype=float).reshape(-1, 2)

    @lazyval
    def _cumulative_length(self):
        segments = np.hypot(*np.diff(self._samples, axis=0).T)
        return np.concatenate([[0.0], np.cumsum(segments)])

    @lazyval
    def length(self):
        """The natural length of the curve in osu! pixels.
        """
        return float(self._cumulative_length[-1])

    def __call__(self, t):
        samples = self._samples
        if len(samples) == 1:
            return Position(*map(float, samples[0]))

        req_length = self.req_length
        if req_length is None:
            req_length = self.length
        target = clamp(t, 0, 1) * req_length

        cumulative = self._cumulative_length
        ix = int(np.clip(
            np.searchsorted(cumulative, target, side='right') - 1,
            0,
            len(samples) - 2,
        ))
        start = samples[ix]
        end = samples[ix + 1]
        segment_length = cumulative[ix + 1] - cumulative[ix]
        if segment_length == 0:
            return Position(*map(float, end))

        amount = (target - cumulative[ix]) / segment_length
        return Position(*map(float, start + (end - start) * amount))


class Linear(_SampledCurve):
    kinds = 'L'

    def _sample(self):
        return self.points


class Bezier(_SampledCurve):
    """A bezier curve; repeated control points start a new segment.
    """
    kinds = 'B'

    samples_per_segment = 50

    def _sample(self):
        out = []
        for segment in split_at_dupes(self.points):
            n = len(segment) - 1
            if n == 0:
                out.append(np.asarray(segment, dtype=float))
                continue

            t = np.linspace(0, 1, num=self.samples_per_segment)[:, np.newaxis]
            ixs = np.arange(n + 1)
            basis = comb(n, ixs) * (1 - t) ** (n - ixs) * t ** ixs
            out.append(basis @ np.asarray(segment, dtype=float))

        return np.concatenate(out)


class Perfect(Curve):
    """A circular arc through three points.
    """
    kinds = 'P'

    def __new__(cls, points, req_length=None):
        if len(points) != 3:
            # more or fewer points than an arc can describe use a bezier
            return Bezier(points, req_length)

        try:
            center = get_center(*points)
        except ValueError:
            # collinear points cannot describe an arc
            return Bezier(points, req_length)

        self = super().__new__(cls)
        self._init(points, req_length, center)
        return self

    def _init(self, points, req_length, center):
        self.points = [Position(*p) for p in points]
        self.req_length = req_length
        self._center = center

        coordinates = np.array(points, dtype=float) - center

        # angles of the first and last points to the center
        start_angle, end_angle = np.arctan2(
            coordinates[::2, 1],
            coordinates[::2, 0],
        )

        # normalize so that self._angle is positive
        if end_angle < start_angle:
            end_angle += 2 * math.pi

        self._angle = end_angle - start_angle

        # switch angle direction if the middle point is on the other side
        a_to_c = coordinates[2] - coordinates[0]
        ortho_a_to_c = np.array((a_to_c[1], -a_to_c[0]))
        if np.dot(ortho_a_to_c, coordinates[1] - coordinates[0]) < 0:
            self._angle = -(2 * math.pi - self._angle)

        self.length = abs(self._angle * float(np.hypot(*coordinates[0])))
        if req_length is not None and self.length > req_length:
            self._angle *= req_length / self.length

    def __init__(self, points, req_length=None):
        # all initialization happens in ``__new__``
        pass

    def __call__(self, t):
        return rotate(self.points[0], self._center, self._angle * t)


def get_center(a, b, c):
    """Returns the Position of the center of the circle described by the 3
    points

    Parameters
    ----------
    a, b, c : Position
        The three positions.

    Returns
    -------
    center : Position
        The center of the three points.

    Raises
    ------
    ValueError
        Raised when the points are collinear or coincide.
    """
    a, b, c = np.array([a, b, c], dtype=float)

    a_squared = np.sum(np.square(b - c))
    b_squared = np.sum(np.square(a - c))
    c_squared = np.sum(np.square(a - b))

    if np.isclose([a_squared, b_squared, c_squared], 0).any():
        raise ValueError('coincident points')

    s = a_squared * (b_squared + c_squared - a_squared)
    t = b_squared * (a_squared + c_squared - b_squared)
    u = c_squared * (a_squared + b_squared - c_squared)

    sum_ = s + t + u

    if np.isclose(sum_, 0):
        raise ValueError('collinear points')

    return Position(*map(float, (s * a + t * b + u * c) / sum_))


def rotate(position, center, radians):
    """Returns ``position`` rotated ``radians`` around ``center``.

    Parameters
    ----------
    position : Position
        The position to rotate.
    center : Position
        The point to rotate about.
    radians : float
        The number of radians to rotate ``position`` by.
    """
    p_x, p_y = position
    c_x, c_y = center

    x_dist = p_x - c_x
    y_dist = p_y - c_y

    return Position(
        (x_dist * math.cos(radians) - y_dist * math.sin(radians)) + c_x,
        (x_dist * math.sin(radians) + y_dist * math.cos(radians)) + c_y,
    )


def split_at_dupes(points):
    """Split a list of control points wherever a point is repeated.
    """
    out = []
    start = 0
    for i in range(1, len(points)):
        if points[i] == points[i - 1]:
            out.append(points[start:i])
            start = i
    out.append(points[start:])
    return out

from collections import namedtuple

import numpy as np


class Position(namedtuple('Position', 'x y')):
    """A position on the playfield.

    Parameters
    ----------
    x : int or float
        The x coordinate.
    y : int or float
        The y coordinate.

    Notes
    -----
    The visible region of the playfield is [0, 512] by [0, 384]. Positions
    may fall outside of this range for slider curve control points.
    """
    x_max = 512
    y_max = 384

    def __eq__(self, other):
        return self.x == other.x and self.y == other.y

    def __hash__(self):
        return hash((self.x, self.y))

    def scaled(self, factor):
        """Scale both coordinates by ``factor``.
        """
        return Position(self.x * factor, self.y * factor)

    def offset(self, dx, dy):
        return Position(self.x + dx, self.y + dy)


def distance(start, end):
    """The euclidean distance between two positions.
    """
    return float(np.hypot(start.x - end.x, start.y - end.y))


"""Estimate a player's timing deviation from their judgement counts.

Hit errors are modelled as a zero mean normal distribution. Each judgement
category covers the errors between two hit windows, so a deviation gives
every category a probability; the estimate is the deviation which makes the
observed counts most likely.
"""
import logging
import math

import numpy as np
from scipy.optimize import minimize_scalar
from scipy.special import log_ndtr

from .cancellation import check

log = logging.getLogger(__name__)

#: The bounds of the search, in milliseconds.
MIN_DEVIATION = 1e-3
MAX_DEVIATION = 10000

#: Added to the count of the second category so that a play with only
#: perfect judgements still has a finite estimate.
PSEUDO_COUNT = 0.5

XATOL = 1e-6
MAX_ITERATIONS = 500

# stands in for log(0) so the objective stays finite
_LOG_ZERO = -1e10

_SQRT2 = math.sqrt(2)


def log_erfc(x):
    """``log(erfc(x))``, accurate for large ``x``.
    """
    return np.log(2) + log_ndtr(-np.asarray(x, dtype=float) * _SQRT2)


def log_diff(a, b):
    """``log(exp(a) - exp(b))`` for ``a >= b``.
    """
    a = np.asarray(a, dtype=float)
    b = np.asarray(b, dtype=float)
    with np.errstate(divide='ignore', invalid='ignore'):
        out = a + np.log1p(-np.exp(b - a))
    return np.where(np.isneginf(a) | (b >= a), -np.inf, out)


def log_outside(window, deviation):
    """The log probability that a hit error falls outside ``+/- window``.
    """
    return log_erfc(window / (deviation * _SQRT2))


def category_log_probabilities(windows, deviation):
    """The log probability of each judgement category.

    Parameters
    ----------
    windows : sequence[float]
        The hit windows in increasing order, in milliseconds either side of
        the object.
    deviation : float
        The standard deviation of the hit error.

    Returns
    -------
    log_p : np.ndarray[float]
        One entry per window plus a final entry for errors outside the
        widest window.
    """
    return categories_between(
        log_outside(np.asarray(windows, dtype=float), deviation),
    )


def categories_between(outside):
    """The log probability of each judgement category given the log
    probability of missing each window, from the narrowest window out.
    """
    outside = np.asarray(outside, dtype=float)
    inner = np.concatenate([[0.0], outside])
    return np.concatenate([log_diff(inner[:-1], inner[1:]), outside[-1:]])


def log_likelihood(counts, log_p):
    """The mean log likelihood of the counts.

    Categories with a count of zero are skipped.
    """
    counts = np.asarray(counts, dtype=float)
    mask = counts > 0
    log_p = np.maximum(np.asarray(log_p, dtype=float)[mask], _LOG_ZERO)
    return float(np.sum(counts[mask] * log_p) / np.sum(counts))


def with_pseudo_count(counts, index=1):
    """Add :data:`PSEUDO_COUNT` to one category.
    """
    counts = np.array(counts, dtype=float)
    counts[index] += PSEUDO_COUNT
    return counts


def maximise(likelihood, *, cancellation=None):
    """Find the deviation which maximises a likelihood.

    Parameters
    ----------
    likelihood : callable[[float], float]
        The log likelihood of a deviation.
    cancellation : CancellationToken, optional
        Checked on every evaluation of ``likelihood``.

    Returns
    -------
    deviation : float
        The most likely deviation, at most :data:`MAX_DEVIATION`.

    Raises
    ------
    Cancelled
        Raised when ``cancellation`` is cancelled during the search.
    """
    def objective(deviation):
        check(cancellation)
        return -likelihood(deviation)

    result = minimize_scalar(
        objective,
        bounds=(MIN_DEVIATION, MAX_DEVIATION),
        method='bounded',
        options={'xatol': XATOL, 'maxiter': MAX_ITERATIONS},
    )
    if not result.success:
        log.warning(
            'deviation estimate did not converge after %d evaluations: %s',
            result.nfev,
            result.message,
        )
    deviation = min(float(result.x), MAX_DEVIATION)
    log.debug('estimated deviation %gms in %d evaluations',
              deviation,
              result.nfev)
    return deviation


def estimate(windows, counts, *, cancellation=None):
    """Estimate the deviation of a play with a single kind of object.

    Parameters
    ----------
    windows : sequence[float]
        The hit windows in increasing order.
    counts : sequence[int]
        The count of each category; one more than there are windows. The
        last category is a miss.
    cancellation : CancellationToken, optional
        Checked during the search.

    Returns
    -------
    deviation : float or None
        The estimated deviation in milliseconds, or None when there is
        nothing to estimate from.
    """
    if len(counts) != len(windows) + 1:
        raise ValueError(
            f'expected {len(windows) + 1} counts, got {len(counts)}',
        )
    if sum(counts) <= 1 or not sum(counts[:-1]):
        return None

    counts = with_pseudo_count(counts)

    def likelihood(deviation):
        return log_likelihood(
            counts,
            category_log_probabilities(windows, deviation),
        )

    return maximise(likelihood, cancellation=cancellation)


def unstable_rate(deviation):
    """The unstable rate of a deviation, or None.
    """
    if deviation is None:
        return None
    return deviation * 10

import threading


class Cancelled(Exception):
    """Raised when a calculation is aborted through its
    :class:`CancellationToken`.
    """


class CancellationToken:
    """A flag used to abort a running calculation from another thread.

    Calculators check the token once per object while building difficulty
    objects and once per likelihood evaluation while estimating deviation.
    A cancelled calculation raises :class:`Cancelled` and returns no
    attributes.
    """
    def __init__(self):
        self._event = threading.Event()

    def __repr__(self):
        state = 'cancelled' if self.cancelled else 'active'
        return f'<{type(self).__qualname__}: {state}>'

    def cancel(self):
        self._event.set()

    @property
    def cancelled(self):
        return self._event.is_set()

    def raise_if_cancelled(self):
        """Raise :class:`Cancelled` if :meth:`cancel` has been called.
        """
        if self._event.is_set():
            raise Cancelled()


def check(cancellation):
    """Check an optional cancellation token.
    """
    if cancellation is not None:
        cancellation.raise_if_cancelled()

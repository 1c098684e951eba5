"""
Global configuration for tripsparse.

Provides the near-zero threshold (epsilon): values whose magnitude is
below it are treated as absent. The bound is inclusive, |x| >= epsilon
is kept. Every threshold-dependent operation also takes an ``epsilon``
keyword that overrides the global value for that call.

Nothing is read from files or the environment.
"""

import math
from contextlib import contextmanager

from tripsparse.errors import ConfigError


DEFAULT_EPSILON = 0.001


def _validate_epsilon(value):
    try:
        eps = float(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"epsilon must be a real number, got {value!r}") from e
    if not math.isfinite(eps) or eps <= 0.0:
        raise ConfigError(f"epsilon must be finite and > 0, got {eps}")
    return eps


class _Config:
    """
    Global configuration singleton.

    Examples
    --------
    >>> config.epsilon
    0.001
    >>> with config.override(epsilon=1e-6):
    ...     config.epsilon
    1e-06
    """

    def __init__(self):
        self._epsilon = DEFAULT_EPSILON

    @property
    def epsilon(self):
        """Near-zero threshold used when an operation gets epsilon=None."""
        return self._epsilon

    @epsilon.setter
    def epsilon(self, value):
        self._epsilon = _validate_epsilon(value)

    def reset(self):
        """Restore defaults."""
        self._epsilon = DEFAULT_EPSILON

    @contextmanager
    def override(self, epsilon=None):
        """Temporarily replace settings; the previous values come back on exit."""
        previous = self._epsilon
        if epsilon is not None:
            self.epsilon = epsilon
        try:
            yield self
        finally:
            self._epsilon = previous

    def resolve_epsilon(self, epsilon=None):
        """Return ``epsilon`` validated, or the global value when it is None."""
        if epsilon is None:
            return self._epsilon
        return _validate_epsilon(epsilon)

    def __repr__(self):
        return f"Config(epsilon={self._epsilon})"


config = _Config()


def get_epsilon():
    return config.epsilon


def set_epsilon(value):
    config.epsilon = value


def resolve_epsilon(epsilon=None):
    return config.resolve_epsilon(epsilon)


__all__ = [
    "DEFAULT_EPSILON", "config", "get_epsilon", "set_epsilon",
    "resolve_epsilon",
]

"""Exception types raised by the suite's own code.

Playwright errors (launch failures, timeouts) are not wrapped; they reach
the test runner unchanged.
"""

from __future__ import annotations


class E2EError(Exception):
    """Base class for suite errors."""


class ConfigurationError(E2EError):
    """The profile file or a process-level override cannot be used."""


class ProfileNotFoundError(ConfigurationError):
    """A named environment or browser profile is not defined."""


class LifecycleError(E2EError):
    """A scenario world was used outside of its ACTIVE state."""


class DuplicateStepError(E2EError):
    """Two step definitions were registered with the same pattern."""


__all__ = [
    "ConfigurationError",
    "DuplicateStepError",
    "E2EError",
    "LifecycleError",
    "ProfileNotFoundError",
]

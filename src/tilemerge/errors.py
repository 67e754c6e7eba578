from __future__ import annotations


class TileMergeError(Exception):
    """Base class for every error raised by the game core."""


class ConfigurationError(TileMergeError, ValueError):
    """Level configuration is unusable (bad dimensions, missing tile type...)."""


class InvalidDirectionError(TileMergeError, ValueError):
    pass


class InvalidTransitionError(TileMergeError, RuntimeError):
    """State machine was asked to do something its current state forbids."""


class MergeConflictError(TileMergeError, RuntimeError):
    """A single move paired the same tile into more than one merge."""

"""
Exception hierarchy for the tailrisk engine.

Configuration and data problems are detected once at the entry point and
raised synchronously; collaborator shape mismatches are reported as
CollaboratorFailure. Errors raised inside a collaborator are never wrapped.
"""


class TailRiskError(Exception):
    """Base class for all tailrisk errors."""


class ConfigurationError(TailRiskError, ValueError):
    """Invalid control settings, confidence levels or flag combination."""


class DataError(TailRiskError, ValueError):
    """Input series unusable for building an evaluation grid."""


class CollaboratorFailure(TailRiskError, RuntimeError):
    """Density evaluator or path simulator returned an unexpected shape."""

    def __init__(self, collaborator: str, expected, received):
        self.collaborator = collaborator
        self.expected = expected
        self.received = received
        super().__init__(
            f"{collaborator} returned shape {received}, expected {expected}"
        )


__all__ = [
    'TailRiskError',
    'ConfigurationError',
    'DataError',
    'CollaboratorFailure'
]

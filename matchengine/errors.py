"""Exception types raised by the scoring engine."""


class MatchEngineError(Exception):
    """Base class for all engine errors."""


class ContractViolationError(MatchEngineError, ValueError):
    """
    Raised when a caller passes malformed embeddings.

    Embeddings come from an internal model, so a bad vector is a caller
    bug rather than sparse user data.
    """


class ConfigurationError(MatchEngineError, ValueError):
    """Raised for unknown weight sets, bad weights, or invalid config files."""

from __future__ import annotations


class RpsError(Exception):
    """Base class for every error the game reports to the user."""


class ConfigurationError(RpsError, ValueError):
    pass


class InvalidMove(RpsError, ValueError):
    pass


class InvalidInput(RpsError, ValueError):
    pass


class CryptoUnavailable(RpsError, RuntimeError):
    pass


class ProtocolViolation(RpsError, RuntimeError):
    """Commit/reveal steps were called out of order."""

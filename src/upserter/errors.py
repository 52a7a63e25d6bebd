"""Error types raised by the upsert orchestrator."""

from __future__ import annotations


class UpsertError(Exception):
    """Base class for errors raised by upserter itself."""


class InvalidArgumentError(UpsertError, ValueError):
    """Raised when a required argument is present but unusable."""

    def __init__(self, argument: str, message: str | None = None) -> None:
        self.argument = argument
        super().__init__(message or f"Invalid argument: {argument}")


class MissingArgumentError(InvalidArgumentError):
    """Raised when a required argument is ``None``."""

    def __init__(self, argument: str) -> None:
        super().__init__(argument, f"Missing required argument: {argument}")

"""Error types raised while ingesting custom systems."""
from __future__ import annotations


class CustomSystemError(ValueError):
    """An authored system is malformed; only that system is discarded."""


class UsedHandleError(RuntimeError):
    """A body or system handle was used after its ownership moved away."""


class IngestionActiveError(RuntimeError):
    """An ingestion session was started while another one is running."""


# Errors that abort a whole ingestion batch instead of one content file.
BATCH_FATAL_ERRORS = (UsedHandleError, IngestionActiveError)


__all__ = ["BATCH_FATAL_ERRORS", "CustomSystemError", "IngestionActiveError", "UsedHandleError"]

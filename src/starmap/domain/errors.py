"""Failure taxonomy shared by adapters and the ingestion orchestrator."""

from __future__ import annotations

from enum import StrEnum


class ErrorKind(StrEnum):
    TRANSPORT = "transport"
    DECODE = "decode"
    STORE = "store"


class IngestError(RuntimeError):
    """Base class for failures attributable to a single pipeline step."""

    kind: ErrorKind

    def __init__(self, message: str, *, system_id: int | None = None) -> None:
        super().__init__(message)
        self.system_id = system_id


class TransportError(IngestError):
    """Raised when a request to the catalog or the graph store cannot complete."""

    kind = ErrorKind.TRANSPORT


class DecodeError(IngestError):
    """Raised when a response body cannot be parsed into the expected shape."""

    kind = ErrorKind.DECODE


class StoreError(IngestError):
    """Raised when the graph store rejects or fails a query."""

    kind = ErrorKind.STORE

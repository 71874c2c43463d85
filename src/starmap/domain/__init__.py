"""Adapter-free core of the starmap ingestion pipeline."""

from __future__ import annotations

from .errors import DecodeError, ErrorKind, IngestError, StoreError, TransportError
from .ingestion import IngestionOrchestrator, IngestionReport
from .model import Position, SystemRecord
from .ports import SystemDetailFetcher, SystemIdLister, SystemTransformer, SystemWriter

__all__ = [
    "DecodeError",
    "ErrorKind",
    "IngestError",
    "IngestionOrchestrator",
    "IngestionReport",
    "Position",
    "StoreError",
    "SystemDetailFetcher",
    "SystemIdLister",
    "SystemRecord",
    "SystemTransformer",
    "SystemWriter",
    "TransportError",
]

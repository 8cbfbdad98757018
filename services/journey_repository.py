from __future__ import annotations

from typing import Iterator, Optional, Protocol

from services.journey_models import PrequalificationRecord


class JourneyRepository(Protocol):
    def get(self, record_id: str) -> Optional[PrequalificationRecord]: ...

    def add(self, record: PrequalificationRecord) -> None: ...

    def remove(self, record_id: str) -> Optional[PrequalificationRecord]: ...

    def __iter__(self) -> Iterator[PrequalificationRecord]: ...


class InMemoryJourneyRepository:
    """Process-local map of id -> record. Lost on restart."""

    def __init__(self) -> None:
        self._records: dict[str, PrequalificationRecord] = {}

    def get(self, record_id: str) -> Optional[PrequalificationRecord]:
        return self._records.get(record_id)

    def add(self, record: PrequalificationRecord) -> None:
        self._records[record.id] = record

    def remove(self, record_id: str) -> Optional[PrequalificationRecord]:
        return self._records.pop(record_id, None)

    def __iter__(self) -> Iterator[PrequalificationRecord]:
        return iter(list(self._records.values()))

    def __len__(self) -> int:
        return len(self._records)

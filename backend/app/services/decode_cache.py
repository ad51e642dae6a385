from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from backend.app.services.vpic_client import DecodedVehicle


@dataclass(frozen=True)
class CacheEntry:
    vehicle: DecodedVehicle
    cached_at: float
    found: bool = True


class DecodeCache:
    """VIN -> DecodedVehicle map kept for the life of the process.

    Lookups are exact matches; VINs reaching the cache are already
    validated and upper-case. ``cached_at`` is recorded for a future
    eviction policy but nothing expires today.

    VINs vPIC had no results for are stored as ``found=False`` entries
    holding the all-"Unknown" placeholder.
    """

    def __init__(self, *, clock: Callable[[], float] = time.time):
        self._entries: Dict[str, CacheEntry] = {}
        self._clock = clock

    def get(self, vin: str) -> Optional[DecodedVehicle]:
        entry = self._entries.get(vin)
        return entry.vehicle if entry else None

    def entry(self, vin: str) -> Optional[CacheEntry]:
        return self._entries.get(vin)

    def put(self, vin: str, vehicle: DecodedVehicle) -> None:
        self._entries[vin] = CacheEntry(vehicle=vehicle, cached_at=self._clock())

    def put_not_found(self, vin: str) -> None:
        self._entries[vin] = CacheEntry(vehicle=DecodedVehicle.unknown(), cached_at=self._clock(), found=False)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, vin: object) -> bool:
        return vin in self._entries

    def __len__(self) -> int:
        return len(self._entries)

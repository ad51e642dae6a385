from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterable, Optional, Union

from backend.app.services.vpic_client import DecodedVehicle


class DuplicateVehicleError(Exception):
    """Raised when inserting a VIN the registry already holds."""

    def __init__(self, vin: str):
        self.vin = vin
        super().__init__(f"Vehicle {vin} already exists")


@dataclass(frozen=True)
class VehicleRecord:
    vin: str
    manufacturer: str
    model: str
    year: Union[str, int]
    org: str

    @classmethod
    def from_decoded(cls, vin: str, decoded: DecodedVehicle, org: str) -> "VehicleRecord":
        return cls(
            vin=vin,
            manufacturer=decoded.manufacturer,
            model=decoded.model,
            year=decoded.year,
            org=org,
        )

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


DEFAULT_VEHICLES = (
    VehicleRecord(vin="1HGCM82633A123456", manufacturer="Honda", model="Accord", year=2003, org="Hondaorg"),
    VehicleRecord(vin="2HGCM82633A654321", manufacturer="Honda", model="Civic", year=2004, org="civichonda"),
)


class VehicleRegistry:
    """In-memory vehicle store keyed by VIN. Insert-only."""

    def __init__(self, seed: Iterable[VehicleRecord] = ()):
        self._vehicles: Dict[str, VehicleRecord] = {}
        for record in seed:
            self.insert(record)

    def exists(self, vin: str) -> bool:
        return vin in self._vehicles

    def get(self, vin: str) -> Optional[VehicleRecord]:
        return self._vehicles.get(vin)

    def insert(self, record: VehicleRecord) -> VehicleRecord:
        if record.vin in self._vehicles:
            raise DuplicateVehicleError(record.vin)
        self._vehicles[record.vin] = record
        return record

    def __len__(self) -> int:
        return len(self._vehicles)

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional, Protocol, Union

import httpx

from backend.app.core.settings import settings

_logger = logging.getLogger(__name__)

RETRYABLE_STATUS = {429, 500, 502, 503, 504}
UNKNOWN = "Unknown"

FIELD_MANUFACTURER = "Manufacturer Name"
FIELD_MODEL = "Model"
FIELD_MODEL_YEAR = "Model Year"


class VpicError(Exception):
    """Base exception for vPIC decode failures."""

    def __init__(self, message: str, *, vin: str = "", status_code: Optional[int] = None):
        self.vin = vin
        self.status_code = status_code
        super().__init__(message)


class VpicRetryableError(VpicError):
    """Raised when a retryable HTTP status/error is encountered."""


class VpicNotFoundError(VpicError):
    """vPIC answered successfully but returned no results for the VIN."""


@dataclass(frozen=True)
class DecodedVehicle:
    manufacturer: str = UNKNOWN
    model: str = UNKNOWN
    year: Union[str, int] = UNKNOWN

    @classmethod
    def unknown(cls) -> "DecodedVehicle":
        return cls()

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


class AsyncTransport(Protocol):
    async def get(
        self,
        path: str,
        params: Dict[str, Any],
        timeout: float,
    ) -> httpx.Response: ...

    async def close(self) -> None: ...


class HttpxTransport:
    """httpx-based transport with connection pooling."""

    def __init__(self, base_url: str):
        self._client = httpx.AsyncClient(base_url=base_url, timeout=None)

    async def get(
        self,
        path: str,
        params: Dict[str, Any],
        timeout: float,
    ) -> httpx.Response:
        return await self._client.get(path, params=params, timeout=timeout)

    async def close(self) -> None:
        await self._client.aclose()


def _field_value(results: List[Any], variable: str) -> Any:
    for item in results:
        if isinstance(item, dict) and item.get("Variable") == variable:
            value = item.get("Value")
            if value is None or value == "":
                return UNKNOWN
            return value
    return UNKNOWN


def parse_decode_response(body: Any) -> DecodedVehicle:
    """Normalize a DecodeVin payload into a DecodedVehicle."""
    if not isinstance(body, dict):
        raise VpicError("Malformed vPIC payload")
    results = body.get("Results")
    if not isinstance(results, list):
        raise VpicError("vPIC payload missing Results")
    if not results:
        raise VpicNotFoundError("VIN not found in vPIC")
    return DecodedVehicle(
        manufacturer=_field_value(results, FIELD_MANUFACTURER),
        model=_field_value(results, FIELD_MODEL),
        year=_field_value(results, FIELD_MODEL_YEAR),
    )


class VpicClient:
    """Thin async client against the NHTSA vPIC DecodeVin endpoint."""

    def __init__(
        self,
        *,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        max_attempts: Optional[int] = None,
        backoff_base: Optional[float] = None,
        transport: Optional[AsyncTransport] = None,
    ):
        self.base_url = (base_url or settings.vpic_base_url).rstrip("/")
        self.timeout = settings.vpic_timeout if timeout is None else timeout
        attempts = settings.vpic_max_attempts if max_attempts is None else max_attempts
        self.max_attempts = max(1, attempts)
        self.backoff_base = settings.vpic_backoff_base if backoff_base is None else backoff_base
        self._transport = transport or HttpxTransport(self.base_url)
        self._owns_transport = transport is None

    async def aclose(self) -> None:
        if self._owns_transport:
            await self._transport.close()

    async def decode(self, vin: str) -> DecodedVehicle:
        body = await self._fetch_decode(vin)
        vehicle = parse_decode_response(body)
        _logger.info("Decoded %s via vPIC: %s %s %s", vin, vehicle.year, vehicle.manufacturer, vehicle.model)
        return vehicle

    async def _fetch_decode(self, vin: str) -> Any:
        path = f"/vehicles/DecodeVin/{vin}"
        last_error: Optional[Exception] = None
        for attempt in range(self.max_attempts):
            if attempt:
                await self._backoff(attempt - 1)
            try:
                response = await self._transport.get(path, params={"format": "json"}, timeout=self.timeout)
            except httpx.RequestError as exc:
                last_error = exc
                _logger.warning(
                    "DecodeVin %s attempt %d/%d raised %s: %s",
                    vin, attempt + 1, self.max_attempts, type(exc).__name__, exc,
                )
                continue

            if response.status_code in RETRYABLE_STATUS:
                last_error = VpicRetryableError(
                    f"DecodeVin returned HTTP {response.status_code}",
                    vin=vin,
                    status_code=response.status_code,
                )
                _logger.warning(
                    "DecodeVin %s attempt %d/%d returned HTTP %s",
                    vin, attempt + 1, self.max_attempts, response.status_code,
                )
                continue

            if not response.is_success:
                raise VpicError(
                    f"DecodeVin returned HTTP {response.status_code}",
                    vin=vin,
                    status_code=response.status_code,
                )
            try:
                return response.json()
            except ValueError as exc:
                raise VpicError("Invalid JSON from vPIC DecodeVin", vin=vin, status_code=response.status_code) from exc

        if isinstance(last_error, VpicError):
            raise last_error
        raise VpicError(
            f"DecodeVin unreachable after {self.max_attempts} attempt(s): {type(last_error).__name__}: {last_error}",
            vin=vin,
        ) from last_error

    async def _backoff(self, retry: int) -> None:
        delay = self.backoff_base * (2 ** retry)
        jitter = random.uniform(0, 0.3)
        await asyncio.sleep(delay + jitter)

from __future__ import annotations

import asyncio
import logging
from typing import Container, Dict, Optional, Protocol

from backend.app.core.rate_limit import FixedWindowRateLimiter
from backend.app.core.vin import is_valid_vin
from backend.app.services.decode_cache import DecodeCache
from backend.app.services.vehicle_registry import DuplicateVehicleError, VehicleRecord, VehicleRegistry
from backend.app.services.vpic_client import DecodedVehicle, VpicError, VpicNotFoundError

_logger = logging.getLogger(__name__)


class GatewayError(Exception):
    """Base exception for VIN decode gateway failures."""

    def __init__(self, message: str, *, vin: Optional[str] = None):
        self.vin = vin
        super().__init__(message)


class InvalidVinError(GatewayError):
    pass


class InvalidOrgError(GatewayError):
    def __init__(self, org: Optional[str]):
        self.org = org
        super().__init__(f"Unknown organization {org!r}")


class RateLimitedError(GatewayError):
    """Upstream call budget for the current window is spent."""

    def __init__(self, vin: str, retry_after: float = 0.0):
        self.retry_after = retry_after
        super().__init__("Rate limit exceeded. Try again later.", vin=vin)


class UpstreamUnavailableError(GatewayError):
    pass


class NotFoundUpstreamError(GatewayError):
    pass


class DecodeClient(Protocol):
    async def decode(self, vin: str) -> DecodedVehicle: ...


class VinDecodeGateway:
    """Decode VINs through the cache, the shared limiter and vPIC.

    Per request: validate, serve a cache hit, join a pending upstream
    call for the same VIN, otherwise take a limiter slot and call
    upstream. Decodes and "not found" answers are cached; transport
    failures are not. Vehicle creation reuses the same lookup after org
    and duplicate checks.

    The cache, limiter and registry are owned by the caller and may be
    shared with other gateways in the process.
    """

    def __init__(
        self,
        client: DecodeClient,
        cache: DecodeCache,
        limiter: FixedWindowRateLimiter,
        registry: VehicleRegistry,
        known_orgs: Container[str],
    ):
        self.client = client
        self.cache = cache
        self.limiter = limiter
        self.registry = registry
        self.known_orgs = known_orgs
        self._inflight: Dict[str, "asyncio.Task[DecodedVehicle]"] = {}

    async def decode(self, vin: str) -> DecodedVehicle:
        self._require_valid_vin(vin)
        try:
            return await self._lookup(vin)
        except VpicNotFoundError:
            _logger.info("vPIC has no results for %s", vin)
            return DecodedVehicle.unknown()
        except VpicError as exc:
            raise UpstreamUnavailableError("Failed to decode VIN", vin=vin) from exc

    async def create_vehicle(self, vin: str, org: str) -> VehicleRecord:
        self._require_valid_vin(vin)
        if not isinstance(org, str) or org not in self.known_orgs:
            raise InvalidOrgError(org)
        if self.registry.exists(vin):
            raise DuplicateVehicleError(vin)

        try:
            decoded = await self._lookup(vin)
        except VpicNotFoundError as exc:
            raise NotFoundUpstreamError("Vehicle not found in vPIC", vin=vin) from exc
        except VpicError as exc:
            raise UpstreamUnavailableError("Failed to fetch vehicle data from vPIC", vin=vin) from exc

        record = self.registry.insert(VehicleRecord.from_decoded(vin, decoded, org))
        _logger.info("Registered vehicle %s for %s", vin, org)
        return record

    def _require_valid_vin(self, vin: str) -> None:
        if not is_valid_vin(vin):
            raise InvalidVinError("Invalid VIN format", vin=vin if isinstance(vin, str) else None)

    async def _lookup(self, vin: str) -> DecodedVehicle:
        cached = self.cache.entry(vin)
        if cached is not None:
            _logger.debug("Decode cache hit for %s (found=%s)", vin, cached.found)
            if not cached.found:
                raise VpicNotFoundError(f"VIN {vin} not found in vPIC (cached)", vin=vin)
            return cached.vehicle

        pending = self._inflight.get(vin)
        if pending is not None:
            _logger.debug("Joining in-flight decode for %s", vin)
            return await pending

        if not self.limiter.try_acquire():
            retry_after = self.limiter.retry_after()
            _logger.warning("Decode rate limit reached; rejecting %s (retry in %.1fs)", vin, retry_after)
            raise RateLimitedError(vin, retry_after)

        task = asyncio.ensure_future(self.client.decode(vin))
        self._inflight[vin] = task
        try:
            vehicle = await task
        except VpicNotFoundError:
            self.cache.put_not_found(vin)
            raise
        except VpicError as exc:
            _logger.warning("Upstream decode failed for %s: %s", vin, exc)
            raise
        else:
            self.cache.put(vin, vehicle)
            return vehicle
        finally:
            self._inflight.pop(vin, None)

from __future__ import annotations

from functools import lru_cache

from backend.app.core.rate_limit import FixedWindowRateLimiter
from backend.app.core.settings import settings
from backend.app.services.decode_cache import DecodeCache
from backend.app.services.organizations import DEFAULT_ORGANIZATIONS, OrganizationStore
from backend.app.services.vehicle_registry import DEFAULT_VEHICLES, VehicleRegistry
from backend.app.services.vin_gateway import VinDecodeGateway
from backend.app.services.vpic_client import VpicClient


@lru_cache
def get_registry() -> VehicleRegistry:
    return VehicleRegistry(DEFAULT_VEHICLES)


@lru_cache
def get_org_store() -> OrganizationStore:
    return OrganizationStore(DEFAULT_ORGANIZATIONS)


@lru_cache
def get_gateway() -> VinDecodeGateway:
    return VinDecodeGateway(
        client=VpicClient(),
        cache=DecodeCache(),
        limiter=FixedWindowRateLimiter(
            settings.decode_rate_limit_max_calls,
            settings.decode_rate_limit_window_seconds,
        ),
        registry=get_registry(),
        known_orgs=settings.known_orgs,
    )


async def close_gateway() -> None:
    """Close the upstream client of a gateway built by ``get_gateway``."""
    if get_gateway.cache_info().currsize:
        await get_gateway().client.aclose()
        get_gateway.cache_clear()

from __future__ import annotations

import math
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from backend.app.api.deps import get_gateway, get_registry
from backend.app.core.vin import is_valid_vin
from backend.app.services.vehicle_registry import DuplicateVehicleError, VehicleRegistry
from backend.app.services.vin_gateway import (
    InvalidOrgError,
    InvalidVinError,
    NotFoundUpstreamError,
    RateLimitedError,
    UpstreamUnavailableError,
    VinDecodeGateway,
)

router = APIRouter()


class VehicleIn(BaseModel):
    vin: Optional[str] = None
    org: Optional[str] = None


def _rate_limited(exc: RateLimitedError) -> HTTPException:
    return HTTPException(
        status_code=429,
        detail=str(exc),
        headers={"Retry-After": str(max(1, math.ceil(exc.retry_after)))},
    )


@router.get("/decode/{vin}")
async def decode_vin(vin: str, gateway: VinDecodeGateway = Depends(get_gateway)):
    try:
        vehicle = await gateway.decode(vin)
    except InvalidVinError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except RateLimitedError as exc:
        raise _rate_limited(exc) from exc
    except UpstreamUnavailableError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return vehicle.as_dict()


@router.get("/{vin}")
async def vehicle_detail(vin: str, registry: VehicleRegistry = Depends(get_registry)):
    if not is_valid_vin(vin):
        raise HTTPException(status_code=400, detail="Invalid VIN format")
    record = registry.get(vin)
    if record is None:
        raise HTTPException(status_code=404, detail="Vehicle not found")
    return record.as_dict()


@router.post("", status_code=201)
async def create_vehicle(body: VehicleIn, gateway: VinDecodeGateway = Depends(get_gateway)):
    try:
        record = await gateway.create_vehicle(body.vin, body.org)
    except InvalidVinError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except InvalidOrgError as exc:
        raise HTTPException(status_code=400, detail="Invalid organization ID") from exc
    except DuplicateVehicleError as exc:
        raise HTTPException(status_code=409, detail="Vehicle already exists in the system") from exc
    except RateLimitedError as exc:
        raise _rate_limited(exc) from exc
    except NotFoundUpstreamError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except UpstreamUnavailableError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return record.as_dict()

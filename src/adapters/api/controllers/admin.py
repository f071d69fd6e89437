from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response

from src.adapters.api.dependencies import get_api_key_service, require
from src.adapters.api.schemas.admin import (
    ApiKeyActiveSchema,
    ApiKeyCreateSchema,
    ApiKeySchema,
)
from src.app.services.api_key_service import ApiKeyService
from src.domain.models import ApiKey, Permission

router = APIRouter(prefix="/admin", tags=["admin"])

_admin = require(Permission.ADMIN, bucket="admin", limit=30)


@router.get("/keys", response_model=list[ApiKeySchema])
async def list_keys(
    _: ApiKey = Depends(_admin),
    service: ApiKeyService = Depends(get_api_key_service),
) -> list[ApiKeySchema]:
    return [ApiKeySchema.from_domain(k) for k in service.list_keys()]


@router.post("/keys", response_model=ApiKeySchema, status_code=201)
async def create_key(
    req: ApiKeyCreateSchema,
    _: ApiKey = Depends(_admin),
    service: ApiKeyService = Depends(get_api_key_service),
) -> ApiKeySchema:
    api_key = service.create_key(
        name=req.name,
        permissions=req.permissions,
        rate_limit_per_min=req.rate_limit,
    )
    # The only response that carries the full key.
    return ApiKeySchema.from_domain(api_key, masked=False)


@router.patch("/keys/{key}", response_model=ApiKeySchema)
async def set_key_active(
    key: str,
    req: ApiKeyActiveSchema,
    _: ApiKey = Depends(_admin),
    service: ApiKeyService = Depends(get_api_key_service),
) -> ApiKeySchema:
    api_key = service.set_active(key, req.active)
    if api_key is None:
        raise HTTPException(status_code=404, detail="API key not found")
    return ApiKeySchema.from_domain(api_key)


@router.delete("/keys/{key}", status_code=204)
async def revoke_key(
    key: str,
    _: ApiKey = Depends(_admin),
    service: ApiKeyService = Depends(get_api_key_service),
) -> Response:
    if not service.revoke(key):
        raise HTTPException(status_code=404, detail="API key not found")
    return Response(status_code=204)

from typing import Optional

from fastapi import APIRouter, Depends

from barberbook.dependencies.services import get_barbershop_service, get_current_user_id
from barberbook.routes.errors import to_http_exception
from barberbook.schemas.barbershop import (
    BarbershopCreateRequest,
    BarbershopListResponse,
    BarbershopSummary,
    BarbershopUpdateRequest,
    MemberCreateRequest,
    Membership,
)
from barberbook.services import BarbershopService
from barberbook.services.exceptions import ServiceError

router = APIRouter()


@router.get("/barbershops", response_model=BarbershopListResponse)
async def list_barbershops(
    user_id: Optional[str] = Depends(get_current_user_id),
    service: BarbershopService = Depends(get_barbershop_service),
):
    try:
        return await service.list(user_id)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc


@router.post("/barbershops", response_model=BarbershopSummary, status_code=201)
async def create_barbershop(
    req: BarbershopCreateRequest,
    user_id: Optional[str] = Depends(get_current_user_id),
    service: BarbershopService = Depends(get_barbershop_service),
):
    try:
        return await service.create(user_id, req)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc


@router.put("/barbershops/{shop_id}", response_model=BarbershopSummary)
async def update_barbershop(
    shop_id: str,
    req: BarbershopUpdateRequest,
    user_id: Optional[str] = Depends(get_current_user_id),
    service: BarbershopService = Depends(get_barbershop_service),
):
    try:
        return await service.update(user_id, shop_id, req)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc


@router.delete("/barbershops/{shop_id}", status_code=204)
async def delete_barbershop(
    shop_id: str,
    user_id: Optional[str] = Depends(get_current_user_id),
    service: BarbershopService = Depends(get_barbershop_service),
):
    try:
        await service.delete(user_id, shop_id)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc


@router.post("/members", response_model=Membership, status_code=201)
async def add_member(
    req: MemberCreateRequest,
    user_id: Optional[str] = Depends(get_current_user_id),
    service: BarbershopService = Depends(get_barbershop_service),
):
    try:
        return await service.add_member(user_id, req)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc

from fastapi import APIRouter, Depends

from barberbook.dependencies.services import (
    get_barber_service,
    get_barbershop_service,
    get_booking_service,
    get_catalog_service,
)
from barberbook.routes.errors import to_http_exception
from barberbook.schemas.appointment import BookingRequest, BookingResponse
from barberbook.schemas.availability import SlotListResponse, SlotQuery
from barberbook.schemas.barbershop import PublicShopResponse
from barberbook.schemas.catalog import BarberListResponse, ServiceListResponse
from barberbook.services import BarberService, BarbershopService, BookingService, CatalogService
from barberbook.services.exceptions import ServiceError

router = APIRouter()


@router.get("/{slug}", response_model=PublicShopResponse)
async def get_shop(
    slug: str,
    service: BarbershopService = Depends(get_barbershop_service),
):
    try:
        return await service.get_public_profile(slug)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc


@router.get("/{slug}/services", response_model=ServiceListResponse)
async def list_services(
    slug: str,
    service: CatalogService = Depends(get_catalog_service),
):
    try:
        return await service.list_public(slug)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc


@router.get("/{slug}/barbers", response_model=BarberListResponse)
async def list_barbers(
    slug: str,
    service: BarberService = Depends(get_barber_service),
):
    try:
        return await service.list_public(slug)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc


@router.post("/{slug}/availability", response_model=SlotListResponse)
async def available_slots(
    slug: str,
    req: SlotQuery,
    service: BookingService = Depends(get_booking_service),
):
    try:
        return await service.available_slots(slug, req)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc


@router.post("/{slug}/appointments", response_model=BookingResponse, status_code=201)
async def book_appointment(
    slug: str,
    req: BookingRequest,
    service: BookingService = Depends(get_booking_service),
):
    try:
        return await service.book(slug, req)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc

from typing import Optional

from fastapi import APIRouter, Depends

from barberbook.dependencies.services import (
    get_analytics_service,
    get_appointment_service,
    get_availability_service,
    get_barber_service,
    get_catalog_service,
    get_current_user_id,
    get_profile_service,
)
from barberbook.routes.errors import to_http_exception
from barberbook.schemas.analytics import DashboardStats, MonthlyRevenueResponse
from barberbook.schemas.appointment import (
    AppointmentListResponse,
    AppointmentRecord,
    StatusUpdateRequest,
)
from barberbook.schemas.availability import WeeklyAvailability
from barberbook.schemas.barbershop import (
    BarbershopSummary,
    ImageUploadRequest,
    ImageUploadTicket,
    ProfileUpdateRequest,
)
from barberbook.schemas.billing import PaymentListResponse, PaymentRecord, PaymentRequest
from barberbook.schemas.catalog import (
    Barber,
    BarberListResponse,
    BarberRequest,
    ServiceItem,
    ServiceListResponse,
    ServiceRequest,
)
from barberbook.services import (
    AnalyticsService,
    AppointmentService,
    AvailabilityService,
    BarberService,
    CatalogService,
    ProfileService,
)
from barberbook.services.exceptions import ServiceError

router = APIRouter()


# Appointments and payments


@router.get("/{slug}/appointments", response_model=AppointmentListResponse)
async def list_appointments(
    slug: str,
    user_id: Optional[str] = Depends(get_current_user_id),
    service: AppointmentService = Depends(get_appointment_service),
):
    try:
        return await service.list(user_id, slug)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc


@router.post("/{slug}/appointments/{appointment_id}/status", response_model=AppointmentRecord)
async def update_appointment_status(
    slug: str,
    appointment_id: str,
    req: StatusUpdateRequest,
    user_id: Optional[str] = Depends(get_current_user_id),
    service: AppointmentService = Depends(get_appointment_service),
):
    try:
        return await service.update_status(user_id, slug, appointment_id, req)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc


@router.post(
    "/{slug}/appointments/{appointment_id}/payments",
    response_model=PaymentRecord,
    status_code=201,
)
async def register_payment(
    slug: str,
    appointment_id: str,
    req: PaymentRequest,
    user_id: Optional[str] = Depends(get_current_user_id),
    service: AppointmentService = Depends(get_appointment_service),
):
    try:
        return await service.register_payment(user_id, slug, appointment_id, req)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc


@router.get("/{slug}/payments", response_model=PaymentListResponse)
async def list_payments(
    slug: str,
    user_id: Optional[str] = Depends(get_current_user_id),
    service: AppointmentService = Depends(get_appointment_service),
):
    try:
        return await service.list_payments(user_id, slug)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc


@router.get("/{slug}/stats", response_model=DashboardStats)
async def dashboard_stats(
    slug: str,
    user_id: Optional[str] = Depends(get_current_user_id),
    service: AnalyticsService = Depends(get_analytics_service),
):
    try:
        return await service.stats(user_id, slug)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc


@router.get("/{slug}/revenue/monthly", response_model=MonthlyRevenueResponse)
async def monthly_revenue(
    slug: str,
    year: Optional[int] = None,
    barber_id: Optional[str] = None,
    user_id: Optional[str] = Depends(get_current_user_id),
    service: AnalyticsService = Depends(get_analytics_service),
):
    try:
        return await service.monthly_revenue(user_id, slug, year=year, barber_id=barber_id)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc


# Services catalog


@router.get("/{slug}/services", response_model=ServiceListResponse)
async def list_services(
    slug: str,
    user_id: Optional[str] = Depends(get_current_user_id),
    service: CatalogService = Depends(get_catalog_service),
):
    try:
        return await service.list(user_id, slug)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc


@router.post("/{slug}/services", response_model=ServiceItem, status_code=201)
async def create_service(
    slug: str,
    req: ServiceRequest,
    user_id: Optional[str] = Depends(get_current_user_id),
    service: CatalogService = Depends(get_catalog_service),
):
    try:
        return await service.create(user_id, slug, req)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc


@router.put("/{slug}/services/{service_id}", response_model=ServiceItem)
async def update_service(
    slug: str,
    service_id: str,
    req: ServiceRequest,
    user_id: Optional[str] = Depends(get_current_user_id),
    service: CatalogService = Depends(get_catalog_service),
):
    try:
        return await service.update(user_id, slug, service_id, req)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc


@router.post("/{slug}/services/{service_id}/toggle", response_model=ServiceItem)
async def toggle_service(
    slug: str,
    service_id: str,
    user_id: Optional[str] = Depends(get_current_user_id),
    service: CatalogService = Depends(get_catalog_service),
):
    try:
        return await service.toggle(user_id, slug, service_id)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc


@router.delete("/{slug}/services/{service_id}", status_code=204)
async def delete_service(
    slug: str,
    service_id: str,
    user_id: Optional[str] = Depends(get_current_user_id),
    service: CatalogService = Depends(get_catalog_service),
):
    try:
        await service.delete(user_id, slug, service_id)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc


# Opening hours


@router.get("/{slug}/availability", response_model=WeeklyAvailability)
async def get_availability(
    slug: str,
    user_id: Optional[str] = Depends(get_current_user_id),
    service: AvailabilityService = Depends(get_availability_service),
):
    try:
        return await service.get_week(user_id, slug)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc


@router.put("/{slug}/availability", response_model=WeeklyAvailability)
async def save_availability(
    slug: str,
    req: WeeklyAvailability,
    user_id: Optional[str] = Depends(get_current_user_id),
    service: AvailabilityService = Depends(get_availability_service),
):
    try:
        return await service.save_week(user_id, slug, req)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc


# Barbers


@router.get("/{slug}/barbers", response_model=BarberListResponse)
async def list_barbers(
    slug: str,
    user_id: Optional[str] = Depends(get_current_user_id),
    service: BarberService = Depends(get_barber_service),
):
    try:
        return await service.list(user_id, slug)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc


@router.post("/{slug}/barbers", response_model=Barber, status_code=201)
async def create_barber(
    slug: str,
    req: BarberRequest,
    user_id: Optional[str] = Depends(get_current_user_id),
    service: BarberService = Depends(get_barber_service),
):
    try:
        return await service.create(user_id, slug, req)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc


@router.put("/{slug}/barbers/{barber_id}", response_model=Barber)
async def update_barber(
    slug: str,
    barber_id: str,
    req: BarberRequest,
    user_id: Optional[str] = Depends(get_current_user_id),
    service: BarberService = Depends(get_barber_service),
):
    try:
        return await service.update(user_id, slug, barber_id, req)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc


@router.delete("/{slug}/barbers/{barber_id}", status_code=204)
async def delete_barber(
    slug: str,
    barber_id: str,
    user_id: Optional[str] = Depends(get_current_user_id),
    service: BarberService = Depends(get_barber_service),
):
    try:
        await service.delete(user_id, slug, barber_id)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc


# Profile


@router.get("/{slug}/profile", response_model=BarbershopSummary)
async def get_profile(
    slug: str,
    user_id: Optional[str] = Depends(get_current_user_id),
    service: ProfileService = Depends(get_profile_service),
):
    try:
        return await service.get_profile(user_id, slug)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc


@router.put("/{slug}/profile", response_model=BarbershopSummary)
async def update_profile(
    slug: str,
    req: ProfileUpdateRequest,
    user_id: Optional[str] = Depends(get_current_user_id),
    service: ProfileService = Depends(get_profile_service),
):
    try:
        return await service.update_profile(user_id, slug, req)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc


@router.post("/{slug}/profile/images/{kind}", response_model=ImageUploadTicket)
async def request_image_upload(
    slug: str,
    kind: str,
    req: ImageUploadRequest,
    user_id: Optional[str] = Depends(get_current_user_id),
    service: ProfileService = Depends(get_profile_service),
):
    try:
        return await service.request_image_upload(user_id, slug, kind, req)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc

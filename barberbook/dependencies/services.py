from __future__ import annotations

import logging
from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header

from barberbook.clients.supabase import SupabaseClient
from barberbook.config import Settings, get_settings
from barberbook.services import (
    AnalyticsService,
    AppointmentService,
    AvailabilityService,
    BarberService,
    BarbershopService,
    BookingService,
    CatalogService,
    ProfileService,
)

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_supabase_client_cached() -> SupabaseClient:
    settings = get_settings()
    logger.debug("Creating data store client (mock=%s)", settings.use_mock_data)
    return SupabaseClient(
        str(settings.supabase_url) if settings.supabase_url else None,
        api_key=settings.supabase_key,
        service_role_key=settings.supabase_service_role_key,
        timeout=settings.supabase_timeout,
        use_mock_data=settings.use_mock_data,
        storage_bucket=settings.storage_bucket,
    )


def get_supabase_client(settings: Settings = Depends(get_settings)) -> SupabaseClient:
    return get_supabase_client_cached()


def get_current_user_id(x_user_id: Optional[str] = Header(None)) -> Optional[str]:
    """Authenticated user id forwarded by the auth proxy, if any."""
    return x_user_id.strip() if x_user_id and x_user_id.strip() else None


def get_booking_service(
    client: SupabaseClient = Depends(get_supabase_client),
) -> BookingService:
    return BookingService(client)


def get_availability_service(
    client: SupabaseClient = Depends(get_supabase_client),
) -> AvailabilityService:
    return AvailabilityService(client)


def get_appointment_service(
    client: SupabaseClient = Depends(get_supabase_client),
) -> AppointmentService:
    return AppointmentService(client)


def get_analytics_service(
    client: SupabaseClient = Depends(get_supabase_client),
) -> AnalyticsService:
    return AnalyticsService(client)


def get_catalog_service(
    client: SupabaseClient = Depends(get_supabase_client),
) -> CatalogService:
    return CatalogService(client)


def get_barber_service(
    client: SupabaseClient = Depends(get_supabase_client),
) -> BarberService:
    return BarberService(client)


def get_barbershop_service(
    client: SupabaseClient = Depends(get_supabase_client),
) -> BarbershopService:
    return BarbershopService(client)


def get_profile_service(
    client: SupabaseClient = Depends(get_supabase_client),
) -> ProfileService:
    return ProfileService(client)

"""Service package public API definitions.

Service implementations depend on ``barberbook.clients.supabase`` which in
turn imports ``barberbook.services.exceptions``. Importing every service
eagerly from here would make that a circular import, so implementations are
loaded lazily on first attribute access.
"""

from __future__ import annotations

from importlib import import_module
from typing import TYPE_CHECKING, Any

__all__ = [
    "AnalyticsService",
    "AppointmentService",
    "AvailabilityService",
    "BarberService",
    "BarbershopService",
    "BookingService",
    "CatalogService",
    "ProfileService",
]

_SERVICE_MODULES = {
    "AnalyticsService": "analytics",
    "AppointmentService": "appointments",
    "AvailabilityService": "availability",
    "BarberService": "barbers",
    "BarbershopService": "tenants",
    "BookingService": "booking",
    "CatalogService": "catalog",
    "ProfileService": "branding",
}


def __getattr__(name: str) -> Any:
    if name not in _SERVICE_MODULES:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

    module = import_module(f".{_SERVICE_MODULES[name]}", __name__)
    attr = getattr(module, name)
    globals()[name] = attr
    return attr


if TYPE_CHECKING:  # pragma: no cover - import for static analysis only
    from .analytics import AnalyticsService as AnalyticsService
    from .appointments import AppointmentService as AppointmentService
    from .availability import AvailabilityService as AvailabilityService
    from .barbers import BarberService as BarberService
    from .booking import BookingService as BookingService
    from .branding import ProfileService as ProfileService
    from .catalog import CatalogService as CatalogService
    from .tenants import BarbershopService as BarbershopService

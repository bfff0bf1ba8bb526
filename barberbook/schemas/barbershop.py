from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

Role = Literal["owner", "staff"]


class BarbershopSummary(BaseModel):
    """Tenant record as managed by the master admin."""

    id: str
    name: str
    slug: str
    description: Optional[str] = None
    logo_url: Optional[str] = None
    hero_background_url: Optional[str] = None
    is_active: bool = True
    updated_at: Optional[str] = None


class BarbershopCreateRequest(BaseModel):
    name: str = Field(..., description="Display name of the barbershop")
    slug: Optional[str] = Field(None, description="URL slug; derived from the name when omitted")
    description: Optional[str] = None
    is_active: bool = False


class BarbershopUpdateRequest(BaseModel):
    name: str
    slug: str
    description: Optional[str] = None
    is_active: bool = False


class BarbershopListResponse(BaseModel):
    total: int
    items: List[BarbershopSummary]


class PublicShopResponse(BaseModel):
    """Public profile with storage paths resolved to browser URLs."""

    id: str
    name: str
    slug: str
    description: str
    logo_url: str = ""
    hero_background_url: str = ""


class ProfileUpdateRequest(BaseModel):
    name: str
    description: Optional[str] = None
    logo_url: Optional[str] = None
    hero_background_url: Optional[str] = None


class ImageUploadRequest(BaseModel):
    filename: str
    content_type: str


class ImageUploadTicket(BaseModel):
    path: str
    public_url: str


class MemberCreateRequest(BaseModel):
    user_id: str
    barbershop_id: str
    role: Role = "owner"
    barber_id: Optional[str] = None


class Membership(BaseModel):
    id: Optional[str] = None
    user_id: str
    barbershop_id: str
    role: Role
    barber_id: Optional[str] = None

    @property
    def is_owner(self) -> bool:
        return self.role == "owner"

    @property
    def is_staff(self) -> bool:
        return self.role == "staff"

"""
API Request and Response Models.

Pydantic models for validating API requests and serializing responses.
Form validation rules of the back office (required fields, phone / email /
website formats) live here.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from domain.company import Company
from domain.courier import Courier
from domain.request import Request, RequestSource, RequestStatus

PHONE_PATTERN = re.compile(r"^\+?[0-9\s\-()]{7,20}$")
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
WEBSITE_PATTERN = re.compile(r"^https?://.+")


def _check_phone(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    if value and not PHONE_PATTERN.match(value):
        raise ValueError("Invalid phone number format")
    return value


def _check_email(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    if value and not EMAIL_PATTERN.match(value):
        raise ValueError("Invalid email format")
    return value


def _check_website(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    if value and not WEBSITE_PATTERN.match(value):
        raise ValueError("Website must start with http:// or https://")
    return value


def _check_required(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    if not value:
        raise ValueError("Field is required")
    return value


# ============================================================================
# Request Models
# ============================================================================

class RequestResponse(BaseModel):
    """Single request in API responses."""
    id: str
    full_name: str
    phone: str
    birth_date: str
    birth_date_display: Optional[str] = None
    status: str
    source: str
    comment: Optional[str] = None
    tags: List[str]
    assigned_to: str
    priority: str
    referrer: str
    user_agent: str
    created_at: datetime
    updated_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, request: Request, birth_date_display: Optional[str] = None) -> "RequestResponse":
        return cls(
            id=request.id,
            full_name=request.full_name,
            phone=request.phone,
            birth_date=request.birth_date,
            birth_date_display=birth_date_display,
            status=request.status,
            source=request.source,
            comment=request.comment,
            tags=list(request.tags),
            assigned_to=request.assigned_to,
            priority=request.priority,
            referrer=request.referrer,
            user_agent=request.user_agent,
            created_at=request.created_at,
            updated_at=request.updated_at,
        )


class RequestListResponse(BaseModel):
    """Filtered request listing."""
    items: List[RequestResponse]
    count: int
    total: int
    filters_applied: dict

    class Config:
        json_schema_extra = {
            "example": {
                "items": [],
                "count": 3,
                "total": 120,
                "filters_applied": {
                    "q": "22",
                    "status": "accepted",
                    "date_window": "week"
                }
            }
        }


class DayGroupResponse(BaseModel):
    """New requests created on one local day."""
    day: date
    label: str
    count: int
    items: List[RequestResponse]


class GroupedRequestsResponse(BaseModel):
    groups: List[DayGroupResponse]
    total_new: int


class HourCountResponse(BaseModel):
    hour: int
    count: int


class StatisticsResponse(BaseModel):
    """Statistics snapshot plus values derived from it."""
    statistics: Dict[str, Any]
    peak_hour: HourCountResponse
    average_per_day: int
    average_per_week: int

    class Config:
        json_schema_extra = {
            "example": {
                "statistics": {
                    "total": {"all": 10, "accepted": 4, "rejected": 2, "new": 3,
                              "noAnswer": 1, "acceptanceRate": 40, "rejectionRate": 20},
                    "today": {"count": 3, "accepted": 1, "rejected": 1, "new": 1},
                    "thisWeek": {"count": 7, "accepted": 3, "rejected": 2, "new": 2},
                    "thisMonth": {"count": 10, "accepted": 4, "rejected": 2, "new": 3},
                    "hourlyStats": [{"hour": 0, "count": 0}],
                    "dailyStats": [{"date": "2026-10-19", "count": 3}]
                },
                "peak_hour": {"hour": 9, "count": 5},
                "average_per_day": 0,
                "average_per_week": 1
            }
        }


class ManualRequestCreate(BaseModel):
    """
    Request entered by hand in the back office.

    At least one of full name, phone or birth date must be filled; the source
    channel is required.
    """
    full_name: str = ""
    phone: str = ""
    birth_date: Optional[date] = None
    source: RequestSource = Field(..., description="Channel the request came from")

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, value: str) -> str:
        return _check_phone(value)

    @field_validator("full_name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        return value.strip()

    @model_validator(mode="after")
    def require_contact(self) -> "ManualRequestCreate":
        if not self.full_name and not self.phone and self.birth_date is None:
            raise ValueError("Fill in at least one field: full name, phone number or birth date")
        return self

    class Config:
        json_schema_extra = {
            "example": {
                "full_name": "Ivan Petrov",
                "phone": "+7 (900) 000-00-00",
                "birth_date": "1990-02-01",
                "source": "phone_call"
            }
        }


class StatusUpdate(BaseModel):
    status: RequestStatus


class StatusChangeResponse(BaseModel):
    request_id: str
    previous_status: str
    status: str
    updated_at: datetime


# ============================================================================
# Company Models
# ============================================================================

class CompanyCreate(BaseModel):
    name: str
    description: str = ""
    address: str = ""
    phone: str = ""
    email: str = ""
    website: str = ""

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: Optional[str]) -> Optional[str]:
        return _check_required(value)

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, value: Optional[str]) -> Optional[str]:
        return _check_phone(value)

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: Optional[str]) -> Optional[str]:
        return _check_email(value)

    @field_validator("website")
    @classmethod
    def validate_website(cls, value: Optional[str]) -> Optional[str]:
        return _check_website(value)

    @field_validator("description", "address")
    @classmethod
    def strip_text(cls, value: str) -> str:
        return value.strip()


class CompanyUpdate(BaseModel):
    """Partial update; only fields that are sent are written."""
    name: Optional[str] = None
    description: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: Optional[str]) -> Optional[str]:
        return _check_required(value)

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, value: Optional[str]) -> Optional[str]:
        return _check_phone(value)

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: Optional[str]) -> Optional[str]:
        return _check_email(value)

    @field_validator("website")
    @classmethod
    def validate_website(cls, value: Optional[str]) -> Optional[str]:
        return _check_website(value)


class CompanyResponse(BaseModel):
    id: str
    name: str
    description: str
    address: str
    phone: str
    email: str
    website: str
    is_active: bool
    active_couriers: int = 0
    created_at: datetime
    updated_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, company: Company, active_couriers: int = 0) -> "CompanyResponse":
        return cls(
            id=company.id,
            name=company.name,
            description=company.description,
            address=company.address,
            phone=company.phone,
            email=company.email,
            website=company.website,
            is_active=company.is_active,
            active_couriers=active_couriers,
            created_at=company.created_at,
            updated_at=company.updated_at,
        )


# ============================================================================
# Courier Models
# ============================================================================

class CourierCreate(BaseModel):
    full_name: str
    phone: str
    email: str = ""
    company_id: Optional[str] = None

    @field_validator("full_name", "phone")
    @classmethod
    def validate_required(cls, value: Optional[str]) -> Optional[str]:
        return _check_required(value)

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: Optional[str]) -> Optional[str]:
        return _check_email(value)


class CourierUpdate(BaseModel):
    """Partial update; send company_id "" to detach the courier from its company."""
    full_name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    company_id: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator("full_name", "phone")
    @classmethod
    def validate_required(cls, value: Optional[str]) -> Optional[str]:
        return _check_required(value)

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: Optional[str]) -> Optional[str]:
        return _check_email(value)


class CourierResponse(BaseModel):
    id: str
    full_name: str
    phone: str
    email: str
    company_id: Optional[str] = None
    company_name: str
    is_active: bool
    created_at: datetime
    updated_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, courier: Courier, company_name: str) -> "CourierResponse":
        return cls(
            id=courier.id,
            full_name=courier.full_name,
            phone=courier.phone,
            email=courier.email,
            company_id=courier.company_id,
            company_name=company_name,
            is_active=courier.is_active,
            created_at=courier.created_at,
            updated_at=courier.updated_at,
        )


# ============================================================================
# Error Models
# ============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    detail: Optional[str] = None
    status_code: int

    class Config:
        json_schema_extra = {
            "example": {
                "error": "Invalid request",
                "detail": "Request not found",
                "status_code": 404
            }
        }

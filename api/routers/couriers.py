"""
Couriers API Endpoints.

Endpoints for managing couriers. A courier's company is a weak reference:
listing resolves it to a display name, falling back to "Not assigned" or
"Company not found".
"""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from api.dependencies import get_locale
from api.models import CourierCreate, CourierResponse, CourierUpdate
from api.settings import get_now
from domain.company import resolve_company_name
from domain.labels import require_locale
from repositories.company_repository import list_companies
from repositories.courier_repository import (
    delete_courier,
    get_courier_by_id,
    insert_courier,
    list_couriers,
    update_courier,
)

router = APIRouter()


def _label_locale(locale: Optional[str], default_locale: str) -> str:
    if locale is None:
        return default_locale
    try:
        return require_locale(locale)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get(
    "/couriers",
    response_model=List[CourierResponse],
    summary="List Couriers",
    description="All couriers ordered by full name, with their company name resolved."
)
def get_couriers(
    locale: Optional[str] = Query(None, description="Label locale ('en' or 'ru')"),
    default_locale: str = Depends(get_locale),
):
    label_locale = _label_locale(locale, default_locale)
    try:
        couriers = list_couriers()
        companies = list_companies()
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to list couriers: {str(e)}"
        )

    return [
        CourierResponse.from_domain(
            courier, resolve_company_name(courier.company_id, companies, label_locale)
        )
        for courier in couriers
    ]


@router.post(
    "/couriers",
    response_model=CourierResponse,
    status_code=201,
    summary="Create Courier"
)
def create_courier(
    payload: CourierCreate,
    now: datetime = Depends(get_now),
    locale: str = Depends(get_locale),
):
    try:
        courier = insert_courier(payload.model_dump(), now)
        companies = list_companies()
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to create courier: {str(e)}"
        )

    return CourierResponse.from_domain(
        courier, resolve_company_name(courier.company_id, companies, locale)
    )


@router.patch(
    "/couriers/{courier_id}",
    response_model=CourierResponse,
    summary="Update Courier",
    description="Partial update; only the fields present in the body are written."
)
def patch_courier(
    courier_id: str,
    payload: CourierUpdate,
    now: datetime = Depends(get_now),
    locale: str = Depends(get_locale),
):
    try:
        if get_courier_by_id(courier_id) is None:
            raise HTTPException(
                status_code=404,
                detail=f"Courier not found: {courier_id}"
            )

        fields = payload.model_dump(exclude_unset=True)
        if fields:
            update_courier(courier_id, fields, now)

        courier = get_courier_by_id(courier_id)
        if courier is None:
            raise HTTPException(
                status_code=404,
                detail=f"Courier not found: {courier_id}"
            )
        companies = list_companies()
        return CourierResponse.from_domain(
            courier, resolve_company_name(courier.company_id, companies, locale)
        )

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to update courier: {str(e)}"
        )


@router.delete(
    "/couriers/{courier_id}",
    status_code=204,
    response_class=Response,
    summary="Delete Courier"
)
def remove_courier(courier_id: str):
    try:
        if get_courier_by_id(courier_id) is None:
            raise HTTPException(
                status_code=404,
                detail=f"Courier not found: {courier_id}"
            )
        delete_courier(courier_id)

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to delete courier: {str(e)}"
        )

    return Response(status_code=204)

"""
Companies API Endpoints.

Endpoints for managing courier companies.
"""

from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response

from api.models import CompanyCreate, CompanyResponse, CompanyUpdate
from api.settings import get_now
from domain.courier import count_active_couriers
from repositories.company_repository import (
    delete_company,
    get_company_by_id,
    insert_company,
    list_companies,
    update_company,
)
from repositories.courier_repository import list_couriers

router = APIRouter()


@router.get(
    "/companies",
    response_model=List[CompanyResponse],
    summary="List Companies",
    description="All companies ordered by name, with the number of active couriers in each."
)
def get_companies():
    try:
        companies = list_companies()
        couriers = list_couriers()
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to list companies: {str(e)}"
        )

    return [
        CompanyResponse.from_domain(company, count_active_couriers(company.id, couriers))
        for company in companies
    ]


@router.post(
    "/companies",
    response_model=CompanyResponse,
    status_code=201,
    summary="Create Company"
)
def create_company(payload: CompanyCreate, now: datetime = Depends(get_now)):
    try:
        company = insert_company(payload.model_dump(), now)
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to create company: {str(e)}"
        )

    return CompanyResponse.from_domain(company)


@router.patch(
    "/companies/{company_id}",
    response_model=CompanyResponse,
    summary="Update Company",
    description="Partial update; only the fields present in the body are written."
)
def patch_company(company_id: str, payload: CompanyUpdate, now: datetime = Depends(get_now)):
    try:
        if get_company_by_id(company_id) is None:
            raise HTTPException(
                status_code=404,
                detail=f"Company not found: {company_id}"
            )

        fields = payload.model_dump(exclude_unset=True)
        if fields:
            update_company(company_id, fields, now)

        company = get_company_by_id(company_id)
        if company is None:
            raise HTTPException(
                status_code=404,
                detail=f"Company not found: {company_id}"
            )
        couriers = list_couriers()
        return CompanyResponse.from_domain(company, count_active_couriers(company.id, couriers))

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to update company: {str(e)}"
        )


@router.delete(
    "/companies/{company_id}",
    status_code=204,
    response_class=Response,
    summary="Delete Company",
    description="Delete a company. Couriers keep their company reference, which then resolves to 'Company not found'."
)
def remove_company(company_id: str):
    try:
        if get_company_by_id(company_id) is None:
            raise HTTPException(
                status_code=404,
                detail=f"Company not found: {company_id}"
            )
        delete_company(company_id)

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to delete company: {str(e)}"
        )

    return Response(status_code=204)

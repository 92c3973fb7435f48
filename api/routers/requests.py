"""
Requests API Endpoints.

Endpoints for listing, grouping, analysing and exporting inbound requests,
and for manual entry and status changes.
"""

import logging
from datetime import datetime
from typing import List, Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from api.dependencies import get_locale, get_requests, notify_requests_changed, request_feed
from api.models import (
    DayGroupResponse,
    GroupedRequestsResponse,
    HourCountResponse,
    ManualRequestCreate,
    RequestListResponse,
    RequestResponse,
    StatisticsResponse,
    StatusChangeResponse,
    StatusUpdate,
)
from api.settings import get_now
from domain.labels import require_locale
from domain.request import Request, describe_birth_date
from services.date_grouping_service import group_new_requests_by_day
from services.excel_export_service import (
    XLSX_MEDIA_TYPE,
    ExportError,
    NothingToExportError,
    build_export,
    write_workbook,
)
from services.request_filter_service import RequestFilter, filter_requests
from services.request_service import RequestNotFoundError, change_status, create_manual_request
from services.statistics_service import (
    average_per_day,
    average_per_week,
    compute_statistics,
    peak_hour,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _build_filter(q: str, status: str, date_window: str) -> RequestFilter:
    try:
        return RequestFilter(text_query=q, status=status, date_window=date_window)
    except ValueError:
        raise HTTPException(
            status_code=400,
            detail=(
                f"Invalid filter. status must be 'all', 'new', 'accepted', 'rejected' or 'no_answer' "
                f"(got '{status}'); date_window must be 'all', 'today', 'week' or 'month' (got '{date_window}')"
            ),
        )


@router.get(
    "/requests",
    response_model=RequestListResponse,
    summary="List Requests",
    description="List requests filtered by free text, status and relative date window."
)
def list_filtered_requests(
    q: str = Query("", description="Case-insensitive search in full name, phone and comment"),
    status: str = Query("all", description="Status filter ('all', 'new', 'accepted', 'rejected', 'no_answer')"),
    date_window: str = Query("all", description="Date window ('all', 'today', 'week', 'month')"),
    requests: List[Request] = Depends(get_requests),
    now: datetime = Depends(get_now),
):
    """
    List requests with optional filters.

    **Example usage:**
    - All requests: `GET /api/v1/requests`
    - Search by phone fragment: `GET /api/v1/requests?q=22`
    - Accepted this week: `GET /api/v1/requests?status=accepted&date_window=week`
    """
    request_filter = _build_filter(q, status, date_window)
    filtered = filter_requests(requests, request_filter, now)

    return RequestListResponse(
        items=[RequestResponse.from_domain(request) for request in filtered],
        count=len(filtered),
        total=len(requests),
        filters_applied={
            "q": request_filter.text_query,
            "status": request_filter.status,
            "date_window": request_filter.date_window.value,
        },
    )


@router.get(
    "/requests/grouped",
    response_model=GroupedRequestsResponse,
    summary="New Requests By Day",
    description="New requests grouped by local creation day, most recent day first."
)
def grouped_new_requests(
    locale: Optional[str] = Query(None, description="Label locale ('en' or 'ru')"),
    requests: List[Request] = Depends(get_requests),
    now: datetime = Depends(get_now),
    default_locale: str = Depends(get_locale),
):
    label_locale = _resolve_locale(locale, default_locale)
    groups = group_new_requests_by_day(requests, now, label_locale)
    today = now.date()

    return GroupedRequestsResponse(
        groups=[
            DayGroupResponse(
                day=group.day,
                label=group.label,
                count=group.count,
                items=[
                    RequestResponse.from_domain(
                        request, describe_birth_date(request.birth_date, today, label_locale)
                    )
                    for request in group.requests
                ],
            )
            for group in groups
        ],
        total_new=sum(group.count for group in groups),
    )


@router.get(
    "/requests/statistics",
    response_model=StatisticsResponse,
    summary="Request Statistics",
    description="Totals, period counts, hourly and daily distributions, peak hour and averages."
)
def request_statistics(
    requests: List[Request] = Depends(get_requests),
    now: datetime = Depends(get_now),
):
    stats = compute_statistics(requests, now)
    peak = peak_hour(stats.hourly_stats)

    return StatisticsResponse(
        statistics=stats.to_dict(),
        peak_hour=HourCountResponse(hour=peak.hour, count=peak.count),
        average_per_day=average_per_day(stats),
        average_per_week=average_per_week(stats),
    )


@router.get(
    "/requests/export",
    summary="Export Requests To Excel",
    description="Download the filtered requests as an .xlsx workbook with a summary sheet.",
    response_class=Response
)
def export_requests(
    q: str = Query("", description="Case-insensitive search in full name, phone and comment"),
    status: str = Query("all", description="Status filter"),
    date_window: str = Query("all", description="Date window filter"),
    locale: Optional[str] = Query(None, description="Label locale ('en' or 'ru')"),
    include_summary: bool = Query(True, description="Add the statistics sheet"),
    requests: List[Request] = Depends(get_requests),
    now: datetime = Depends(get_now),
    default_locale: str = Depends(get_locale),
):
    """
    Export requests to Excel.

    **Response:**
    .xlsx download with filename `requests_DD-MM-YYYY_HH-MM.xlsx`
    (prefix follows the locale).

    **Errors:**
    - 404 when no request matches (nothing to export, no file produced)
    - 500 when the workbook cannot be written
    """
    request_filter = _build_filter(q, status, date_window)
    label_locale = _resolve_locale(locale, default_locale)
    filtered = filter_requests(requests, request_filter, now)

    try:
        export = build_export(filtered, now, label_locale, include_summary=include_summary)
        content = write_workbook(export)
    except NothingToExportError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ExportError as e:
        raise HTTPException(status_code=500, detail=f"Failed to export requests: {str(e)}")

    logger.info(
        "Requests exported",
        extra={"rows": len(filtered), "locale": label_locale, "export_filename": export.filename},
    )

    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={
            "Content-Disposition": f"attachment; filename*=UTF-8''{quote(export.filename)}"
        }
    )


@router.post(
    "/requests",
    response_model=RequestResponse,
    status_code=201,
    summary="Create Manual Request",
    description="Create a request entered by hand in the back office."
)
def create_request(
    payload: ManualRequestCreate,
    now: datetime = Depends(get_now),
):
    try:
        request = create_manual_request(
            full_name=payload.full_name,
            phone=payload.phone,
            birth_date=payload.birth_date,
            source=payload.source.value,
            now=now,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to create request: {str(e)}"
        )

    notify_requests_changed()
    return RequestResponse.from_domain(request)


@router.patch(
    "/requests/{request_id}/status",
    response_model=StatusChangeResponse,
    summary="Change Request Status",
    description="Set the status of a request. Any status may be assigned."
)
def update_status(
    request_id: str,
    payload: StatusUpdate,
    now: datetime = Depends(get_now),
):
    try:
        change = change_status(request_id, payload.status, now)
    except RequestNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to update request status: {str(e)}"
        )

    notify_requests_changed()
    return StatusChangeResponse(
        request_id=change.request_id,
        previous_status=change.previous_status,
        status=change.status,
        updated_at=change.updated_at,
    )


@router.post(
    "/requests/refresh",
    response_model=RequestListResponse,
    summary="Reload Requests",
    description="Re-read the request collection from the store and push it to subscribers."
)
def refresh_requests():
    try:
        requests = request_feed.refresh()
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to reload requests: {str(e)}"
        )

    return RequestListResponse(
        items=[RequestResponse.from_domain(request) for request in requests],
        count=len(requests),
        total=len(requests),
        filters_applied={},
    )


def _resolve_locale(locale: Optional[str], default_locale: str) -> str:
    if locale is None:
        return default_locale
    try:
        return require_locale(locale)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

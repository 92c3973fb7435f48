"""
Excel export service for request collections.

Maps requests (already filtered by the caller if desired) into flat rows keyed
by human-readable column labels, adds an optional summary sheet, and writes the
workbook with openpyxl.

Security:
- Formula injection prevention: string cells that a spreadsheet would read as
  a formula are neutralized with a leading apostrophe
- Security Logging: every neutralized cell is logged
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from io import BytesIO
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from openpyxl import Workbook
from openpyxl.utils import get_column_letter

from domain.labels import (
    DEFAULT_LOCALE,
    labels,
    priority_display_name,
    require_locale,
    source_display_name,
    status_display_name,
    text,
)
from domain.request import Request, RequestStatus
from domain.time import require_aware

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%d.%m.%Y %H:%M"
FILENAME_TIMESTAMP_FORMAT = "%d-%m-%Y_%H-%M"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# (column key, width in characters), in sheet order
REQUEST_COLUMNS: Tuple[Tuple[str, int], ...] = (
    ("number", 5),
    ("id", 20),
    ("created_at", 18),
    ("full_name", 25),
    ("phone", 18),
    ("birth_date", 15),
    ("source", 18),
    ("status", 15),
    ("assigned_to", 20),
    ("priority", 12),
    ("tags", 20),
    ("comment", 30),
    ("referrer", 20),
    ("user_agent", 25),
    ("updated_at", 18),
)

SUMMARY_COLUMNS: Tuple[Tuple[str, int], ...] = (
    ("metric", 25),
    ("value", 15),
)

_FORMULA_TRIGGERS = ("=", "@", "\t", "\r")

Cell = Any


class ExportError(Exception):
    """Raised when a workbook cannot be produced."""
    pass


class NothingToExportError(ExportError):
    """Raised when the request collection is empty."""
    pass


@dataclass(frozen=True, slots=True)
class SheetData:
    """One worksheet: ordered rows keyed by column label, plus column widths."""

    name: str
    columns: List[str]
    widths: List[int]
    rows: List[Dict[str, Cell]] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class WorkbookExport:
    filename: str
    sheets: List[SheetData]


def sanitize_cell(value: Cell, column: str = "unknown") -> Cell:
    """
    Neutralize string values a spreadsheet would evaluate as a formula.

    Values starting with "=", "@", tab or carriage return are prefixed with an
    apostrophe. Leading "+" and "-" are left alone: phone numbers start with "+"
    and openpyxl stores such values as plain strings.

    Example:
        sanitize_cell("=HYPERLINK(...)", "comment")
        # Returns "'=HYPERLINK(...)" and logs a warning

        sanitize_cell("+7 900 000-00-00", "phone")
        # Returns "+7 900 000-00-00" (unchanged, no logging)
    """
    if not isinstance(value, str) or not value.startswith(_FORMULA_TRIGGERS):
        return value

    logger.warning(
        f"Formula trigger neutralized in column '{column}'",
        extra={
            "column": column,
            "original_value": value[:100],
            "modification_type": "formula_injection_prevention",
        },
    )
    return "'" + value


def format_timestamp(value: Optional[datetime], tz: Any = None) -> str:
    """DD.MM.YYYY HH:MM in the given zone; absent timestamps render as ""."""

    if value is None:
        return ""
    return value.astimezone(tz).strftime(TIMESTAMP_FORMAT)


def request_to_row(
    request: Request,
    number: int,
    locale: str = DEFAULT_LOCALE,
    tz: Any = None,
) -> Dict[str, Cell]:
    """Convert a Request into an export row keyed by localized column labels."""

    column = labels("column", locale)
    return {
        column["number"]: number,
        column["id"]: request.id,
        column["created_at"]: format_timestamp(request.created_at, tz),
        column["full_name"]: request.full_name or "",
        column["phone"]: request.phone or "",
        column["birth_date"]: request.birth_date or "",
        column["source"]: source_display_name(request.source, locale),
        column["status"]: status_display_name(request.status, locale),
        column["assigned_to"]: request.assigned_to or text("not_assigned", locale),
        column["priority"]: priority_display_name(request.priority, locale),
        column["tags"]: ", ".join(request.tags),
        column["comment"]: request.comment or "",
        column["referrer"]: request.referrer or "",
        column["user_agent"]: request.user_agent or "",
        column["updated_at"]: format_timestamp(request.updated_at, tz),
    }


def build_request_rows(
    requests: Iterable[Request],
    locale: str = DEFAULT_LOCALE,
    tz: Any = None,
) -> List[Dict[str, Cell]]:
    """Rows for the main sheet, numbered from 1 in input order."""

    require_locale(locale)
    return [request_to_row(request, index, locale, tz) for index, request in enumerate(requests, start=1)]


def build_summary_rows(requests: Sequence[Request], locale: str = DEFAULT_LOCALE) -> List[Dict[str, Cell]]:
    """Aggregate counts for the summary sheet: total, new, accepted, rejected, no answer."""

    summary = labels("summary", locale)
    column = labels("column", locale)

    def count(status: RequestStatus) -> int:
        return sum(1 for request in requests if request.status == status.value)

    values = [
        (summary["total"], len(requests)),
        (summary["new"], count(RequestStatus.NEW)),
        (summary["accepted"], count(RequestStatus.ACCEPTED)),
        (summary["rejected"], count(RequestStatus.REJECTED)),
        (summary["no_answer"], count(RequestStatus.NO_ANSWER)),
    ]
    return [{column["metric"]: metric, column["value"]: value} for metric, value in values]


def export_filename(now: datetime, locale: str = DEFAULT_LOCALE) -> str:
    """Timestamped file name, e.g. requests_19-10-2026_09-15.xlsx."""

    return f"{text('file_prefix', locale)}_{now.strftime(FILENAME_TIMESTAMP_FORMAT)}.xlsx"


def _sheet(name: str, layout: Tuple[Tuple[str, int], ...], rows: List[Dict[str, Cell]], locale: str) -> SheetData:
    column = labels("column", locale)
    return SheetData(
        name=name,
        columns=[column[key] for key, _ in layout],
        widths=[width for _, width in layout],
        rows=rows,
    )


def build_export(
    requests: Sequence[Request],
    now: datetime,
    locale: str = DEFAULT_LOCALE,
    include_summary: bool = True,
) -> WorkbookExport:
    """
    Produce the tabular data for an export.

    Args:
        requests: Request collection, already filtered by the caller
        now: Current instant (timezone-aware); used for local timestamps and the file name
        locale: Label locale ("en" or "ru")
        include_summary: Add the aggregate counts sheet

    Raises:
        NothingToExportError: If requests is empty
        ValueError: If now is naive or the locale is unknown
    """
    require_aware("now", now)
    require_locale(locale)
    items = list(requests)
    if not items:
        raise NothingToExportError("Nothing to export: the request collection is empty")

    sheets = [
        _sheet(text("requests_sheet", locale), REQUEST_COLUMNS, build_request_rows(items, locale, now.tzinfo), locale),
    ]
    if include_summary:
        sheets.append(_sheet(text("summary_sheet", locale), SUMMARY_COLUMNS, build_summary_rows(items, locale), locale))

    return WorkbookExport(filename=export_filename(now, locale), sheets=sheets)


def write_workbook(export: WorkbookExport) -> bytes:
    """
    Write an export to an in-memory .xlsx file.

    Nothing touches the filesystem, so a failure leaves no partial file behind.

    Raises:
        ExportError: If the workbook cannot be written
    """
    try:
        workbook = Workbook()
        workbook.remove(workbook.active)
        for sheet in export.sheets:
            worksheet = workbook.create_sheet(title=sheet.name)
            worksheet.append(sheet.columns)
            for row in sheet.rows:
                worksheet.append([sanitize_cell(row.get(name, ""), name) for name in sheet.columns])
            for index, width in enumerate(sheet.widths, start=1):
                worksheet.column_dimensions[get_column_letter(index)].width = width

        buffer = BytesIO()
        workbook.save(buffer)
    except Exception as e:
        logger.exception("Excel export failed", extra={"export_filename": export.filename})
        raise ExportError(f"Failed to write workbook {export.filename}: {e}") from e

    logger.info(
        "Excel export written",
        extra={
            "export_filename": export.filename,
            "sheets": [sheet.name for sheet in export.sheets],
            "rows": sum(len(sheet.rows) for sheet in export.sheets),
        },
    )
    return buffer.getvalue()


__all__ = [
    "ExportError",
    "NothingToExportError",
    "REQUEST_COLUMNS",
    "SheetData",
    "WorkbookExport",
    "XLSX_MEDIA_TYPE",
    "build_export",
    "build_request_rows",
    "build_summary_rows",
    "export_filename",
    "format_timestamp",
    "request_to_row",
    "sanitize_cell",
    "write_workbook",
]

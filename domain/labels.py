"""
Domain: Display labels.

Human-readable names for request enums, day-group labels and export columns.

Two locales are supported: "en" (default) and "ru". Every locale carries the
same keys; unknown enum values are never translated, they pass through as-is.
"""

from __future__ import annotations

from typing import Dict, Mapping, Optional

DEFAULT_LOCALE = "en"

_LABELS: Dict[str, Dict[str, Dict[str, str]]] = {
    "en": {
        "status": {
            "new": "New",
            "accepted": "Accepted",
            "rejected": "Rejected",
            "no_answer": "No answer",
        },
        "source": {
            "yandex_search": "Yandex Search",
            "google_search": "Google Search",
            "phone_call": "Phone call",
        },
        "priority": {
            "high": "High",
            "medium": "Medium",
            "low": "Low",
        },
        "text": {
            "today": "Today",
            "yesterday": "Yesterday",
            "source_missing": "Not specified",
            "not_assigned": "Not assigned",
            "company_not_assigned": "Not assigned",
            "company_not_found": "Company not found",
            "years": "years",
            "file_prefix": "requests",
            "requests_sheet": "Requests",
            "summary_sheet": "Statistics",
        },
        "column": {
            "number": "#",
            "id": "Request ID",
            "created_at": "Created at",
            "full_name": "Client name",
            "phone": "Phone number",
            "birth_date": "Birth date",
            "source": "Source",
            "status": "Status",
            "assigned_to": "Assigned courier",
            "priority": "Priority",
            "tags": "Tags",
            "comment": "Comment",
            "referrer": "Referrer",
            "user_agent": "User Agent",
            "updated_at": "Updated at",
            "metric": "Metric",
            "value": "Value",
        },
        "summary": {
            "total": "Total requests",
            "new": "New requests",
            "accepted": "Accepted requests",
            "rejected": "Rejected requests",
            "no_answer": "No answer",
        },
    },
    "ru": {
        "status": {
            "new": "Новая",
            "accepted": "Принята",
            "rejected": "Отклонена",
            "no_answer": "Не отвечает",
        },
        "source": {
            "yandex_search": "Яндекс.Поиск",
            "google_search": "Google Поиск",
            "phone_call": "По телефону",
        },
        "priority": {
            "high": "Высокий",
            "medium": "Средний",
            "low": "Низкий",
        },
        "text": {
            "today": "Сегодня",
            "yesterday": "Вчера",
            "source_missing": "Не указан",
            "not_assigned": "Не назначен",
            "company_not_assigned": "Не назначена",
            "company_not_found": "Компания не найдена",
            "years": "лет",
            "file_prefix": "заявки",
            "requests_sheet": "Заявки",
            "summary_sheet": "Статистика",
        },
        "column": {
            "number": "№",
            "id": "ID заявки",
            "created_at": "Дата создания",
            "full_name": "ФИО клиента",
            "phone": "Номер телефона",
            "birth_date": "Дата рождения",
            "source": "Источник заявки",
            "status": "Статус заявки",
            "assigned_to": "Назначенный курьер",
            "priority": "Приоритет",
            "tags": "Теги",
            "comment": "Комментарий",
            "referrer": "Referrer",
            "user_agent": "User Agent",
            "updated_at": "Дата обновления",
            "metric": "Показатель",
            "value": "Значение",
        },
        "summary": {
            "total": "Общее количество заявок",
            "new": "Новые заявки",
            "accepted": "Принятые заявки",
            "rejected": "Отклоненные заявки",
            "no_answer": "Не отвечают",
        },
    },
}

SUPPORTED_LOCALES = tuple(_LABELS)


def require_locale(locale: str) -> str:
    """Validate a locale code, returning it unchanged."""

    if locale not in _LABELS:
        raise ValueError(
            f"Unsupported locale '{locale}'. Expected one of: {', '.join(SUPPORTED_LOCALES)}"
        )
    return locale


def labels(group: str, locale: str = DEFAULT_LOCALE) -> Mapping[str, str]:
    """Return the label table `group` ("status", "column", ...) for `locale`."""

    return _LABELS[require_locale(locale)][group]


def text(key: str, locale: str = DEFAULT_LOCALE) -> str:
    return labels("text", locale)[key]


def status_display_name(status: str, locale: str = DEFAULT_LOCALE) -> str:
    """Map a status value to its display name; unknown values pass through."""

    return labels("status", locale).get(status, status)


def source_display_name(source: Optional[str], locale: str = DEFAULT_LOCALE) -> str:
    """
    Map a source value to its display name.

    Empty source renders as the "not specified" label; unknown values pass through.
    """

    if not source:
        return text("source_missing", locale)
    return labels("source", locale).get(source, source)


def priority_display_name(priority: Optional[str], locale: str = DEFAULT_LOCALE) -> str:
    """Only "high" and "low" are distinguished; everything else reads as medium."""

    table = labels("priority", locale)
    if priority in ("high", "low"):
        return table[priority]
    return table["medium"]


def _inverse(group: str, display_name: str, locale: str) -> str:
    for value, name in labels(group, locale).items():
        if name == display_name:
            return value
    return display_name


def status_from_display_name(display_name: str, locale: str = DEFAULT_LOCALE) -> str:
    """Inverse of `status_display_name` for known statuses."""

    return _inverse("status", display_name, locale)


def source_from_display_name(display_name: str, locale: str = DEFAULT_LOCALE) -> str:
    """Inverse of `source_display_name` for known sources."""

    if display_name == text("source_missing", locale):
        return ""
    return _inverse("source", display_name, locale)


__all__ = [
    "DEFAULT_LOCALE",
    "SUPPORTED_LOCALES",
    "labels",
    "priority_display_name",
    "require_locale",
    "source_display_name",
    "source_from_display_name",
    "status_display_name",
    "status_from_display_name",
    "text",
]

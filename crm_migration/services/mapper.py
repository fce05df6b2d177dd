"""Field mapping from Zoho CRM records to Twenty payloads.

Every function here is pure: no network, no logging, no randomness. Missing
or malformed source values fall back to permissive defaults instead of
raising.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from dateutil import parser as date_parser

from ..models.record import DestinationRecord, SourceRecord

CONTACT_CREATED_BY_SOURCE = "EMAIL"

DEFAULT_TASK_STATUS = "TODO"

TASK_STATUS_MAP: Dict[str, str] = {
    "Open": "TODO",
    "In Progress": "IN_PROGRESS",
    "Completed": "DONE",
}


def map_status(value: Any) -> str:
    """Translate a Zoho task status, defaulting to TODO."""
    if not isinstance(value, str):
        return DEFAULT_TASK_STATUS
    return TASK_STATUS_MAP.get(value, DEFAULT_TASK_STATUS)


def format_timestamp(value: datetime) -> str:
    """Render a datetime as ISO-8601 UTC with millisecond precision."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def normalize_date(value: Any, fallback: Optional[datetime] = None) -> str:
    """
    Parse a date or datetime string and re-emit it as a UTC timestamp.

    Values without an offset are read as UTC. Anything unparseable, or
    outside the range UTC can represent, yields `fallback`, or the current
    time when no fallback is given.
    """
    parsed = None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        try:
            parsed = date_parser.parse(value.strip())
        except (ValueError, OverflowError):
            parsed = None

    if parsed is not None:
        try:
            return format_timestamp(parsed)
        except OverflowError:
            pass

    return format_timestamp(fallback or datetime.now(timezone.utc))


def map_contact(record: SourceRecord, position: int) -> DestinationRecord:
    """Map a Zoho contact to a Twenty person."""
    data = record.data
    return {
        "name": {
            "firstName": data.get("First_Name"),
            "lastName": data.get("Last_Name"),
        },
        "emails": {
            "primaryEmail": data.get("Email"),
            "additionalEmails": [],
        },
        "linkedinLink": {},
        "jobTitle": data.get("Title"),
        "phones": {
            "primaryPhoneNumber": data.get("Phone"),
            "primaryPhoneCountryCode": data.get("Mailing_Country"),
            "additionalPhones": [data.get("Mobile")],
        },
        "city": data.get("Mailing_City"),
        "position": position,
        "createdBy": {
            "source": CONTACT_CREATED_BY_SOURCE,
        },
    }


def map_task(
    record: SourceRecord,
    position: int,
    now: Optional[datetime] = None
) -> DestinationRecord:
    """Map a Zoho task to a Twenty task."""
    data = record.data
    return {
        "title": data.get("Subject"),
        "status": map_status(data.get("Status")),
        "dueAt": normalize_date(data.get("Due_Date"), fallback=now),
        "position": position,
    }

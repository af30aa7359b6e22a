import datetime as dt
import logging
import math
import re
from typing import Any, Dict, List, Optional

from notion_client import AsyncClient

from ticket_processor.core.config import settings
from ticket_processor.core.exceptions import PersistenceError
from ticket_processor.services.results import BestEffortResult

logger = logging.getLogger(__name__)

TICKET_STATUS = "Resolved"
KNOWN_ISSUE_STATUS = "Active"
LESSON_TITLE_MAX_CHARS = 100

_LEADING_INT_RE = re.compile(r"\s*([+-]?\d+)")


# ── property builders ─────────────────────────────────────────────────────────

def _title(content: Any) -> Dict[str, Any]:
    return {"title": [{"text": {"content": str(content or "")}}]}


def _rich_text(content: Any) -> Dict[str, Any]:
    return {"rich_text": [{"text": {"content": str(content or "")}}]}


def _select(name: Any) -> Dict[str, Any]:
    return {"select": {"name": str(name)} if name else None}


def _date(start: str) -> Dict[str, Any]:
    return {"date": {"start": start}}


def _relation(page_id: str) -> Dict[str, Any]:
    return {"relation": [{"id": page_id}]}


def _multi_select(values: Any) -> Dict[str, Any]:
    if values is None:
        values = []
    if not isinstance(values, list):
        raise TypeError(f"tags must be a list, got {type(values).__name__}")
    return {"multi_select": [{"name": str(v)} for v in values]}


def coerce_minutes(value: Any) -> int:
    """Integer minutes from whatever the model produced; non-numeric input counts as zero."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return 0
        return max(int(value), 0)
    match = _LEADING_INT_RE.match(str(value)) if value is not None else None
    if not match:
        return 0
    return max(int(match.group(1)), 0)


def _today() -> str:
    return dt.datetime.now(dt.timezone.utc).date().isoformat()


def build_ticket_properties(ticket_data: Dict[str, Any], today: Optional[str] = None) -> Dict[str, Any]:
    today = today or _today()
    properties: Dict[str, Any] = {
        "Issue Summary": _title(ticket_data.get("issueSummary")),
        "Customer Name": _rich_text(ticket_data.get("customerName") or "Unknown"),
        "Customer Email": {"email": ticket_data.get("customerEmail") or None},
        "Category": _select(ticket_data.get("category")),
        "Priority": _select(ticket_data.get("priority")),
        "Status": _select(TICKET_STATUS),
        "Resolution Summary": _rich_text(ticket_data.get("resolutionSummary")),
        "Created Date": _date(today),
        "Resolution Date": _date(today),
        "Time Spent": {"number": coerce_minutes(ticket_data.get("timeSpent"))},
        "Recurring Issue": {"checkbox": bool(ticket_data.get("isRecurring"))},
        "Follow-up Needed": {"checkbox": bool(ticket_data.get("requiresFollowUp"))},
        "Root Cause": _select(ticket_data.get("rootCause")),
        "Tags": _multi_select(ticket_data.get("tags")),
        "Chat History URLs": {"url": ticket_data.get("chatUrl") or None},
    }

    follow_up_property = settings.NOTION_FOLLOW_UP_DATE_PROPERTY
    follow_up_date = ticket_data.get("followUpDate")
    if follow_up_property and ticket_data.get("requiresFollowUp") and follow_up_date:
        properties[follow_up_property] = _date(str(follow_up_date))

    return properties


# ── writers ───────────────────────────────────────────────────────────────────

async def create_ticket_entry(notion: AsyncClient, ticket_data: Dict[str, Any]) -> str:
    """Create the ticket page and return its id. The only fatal Notion write."""
    try:
        response = await notion.pages.create(
            parent={"database_id": settings.NOTION_TICKETS_DATABASE_ID},
            properties=build_ticket_properties(ticket_data),
        )
    except Exception as e:
        logger.exception("Error creating Notion entry")
        raise PersistenceError("Failed to create Notion database entry") from e

    logger.info("Created ticket page %s", response["id"])
    return response["id"]


async def link_to_known_issue(
    notion: AsyncClient, ticket_id: str, known_issue_name: str
) -> BestEffortResult[str]:
    """Relate the ticket to a known issue, creating the known issue if no name contains the given one."""
    try:
        response = await notion.databases.query(
            database_id=settings.NOTION_KNOWN_ISSUES_DATABASE_ID,
            filter={"property": "Issue Name", "rich_text": {"contains": known_issue_name}},
        )

        results = response.get("results") or []
        if results:
            known_issue_id = results[0]["id"]
        else:
            new_known_issue = await notion.pages.create(
                parent={"database_id": settings.NOTION_KNOWN_ISSUES_DATABASE_ID},
                properties={
                    "Issue Name": _title(known_issue_name),
                    "Status": _select(KNOWN_ISSUE_STATUS),
                },
            )
            known_issue_id = new_known_issue["id"]
            logger.info("Created known issue '%s' (%s)", known_issue_name, known_issue_id)

        await notion.pages.update(page_id=ticket_id, properties={"Known Issue": _relation(known_issue_id)})
    except Exception as e:
        logger.exception("Error linking ticket %s to known issue '%s'", ticket_id, known_issue_name)
        return BestEffortResult.failed(str(e))

    logger.info("Linked ticket %s to known issue %s", ticket_id, known_issue_id)
    return BestEffortResult.succeeded(known_issue_id)


async def create_lessons_learned(
    notion: AsyncClient, ticket_id: str, lessons: List[Any]
) -> BestEffortResult[List[str]]:
    """Create one lesson page per non-blank string entry, in order. Stops at the first failure; earlier pages stay."""
    created: List[str] = []
    try:
        for lesson_text in lessons:
            if not isinstance(lesson_text, str) or not lesson_text.strip():
                logger.warning("Skipping lesson entry for ticket %s: not a non-empty string (%r)", ticket_id, lesson_text)
                continue
            new_lesson = await notion.pages.create(
                parent={"database_id": settings.NOTION_LESSONS_DATABASE_ID},
                properties={
                    "Title": _title(lesson_text[:LESSON_TITLE_MAX_CHARS]),
                    "Description": _rich_text(lesson_text),
                    "Category": _select(settings.LESSONS_DEFAULT_CATEGORY),
                    "Related Tickets": _relation(ticket_id),
                },
            )
            created.append(new_lesson["id"])
    except Exception as e:
        logger.exception(
            "Error creating lessons learned for ticket %s (%d of %d created)", ticket_id, len(created), len(lessons)
        )
        return BestEffortResult.failed(str(e), value=[])

    return BestEffortResult.succeeded(created)

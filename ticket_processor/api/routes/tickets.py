import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends
from notion_client import AsyncClient

from ticket_processor.api.dependencies import get_extractor, get_notion_client
from ticket_processor.api.security import require_api_key
from ticket_processor.core.exceptions import ValidationError
from ticket_processor.schemas.ticket_schema import (
    ConversationInput,
    ErrorResponse,
    ProcessTicketResponse,
    TicketInfo,
)
from ticket_processor.services.extraction import extract_ticket_info
from ticket_processor.services.llm_router import TextCompletionProvider
from ticket_processor.services.notion_service import (
    create_lessons_learned,
    create_ticket_entry,
    link_to_known_issue,
)

logger = logging.getLogger(__name__)
router = APIRouter()


def merge_ticket_data(ticket_info: TicketInfo, request: ConversationInput) -> Dict[str, Any]:
    """Extracted fields plus caller metadata; non-empty caller customer fields win."""
    return {
        **ticket_info,
        "customerName": request.customer_name or ticket_info.get("customerName"),
        "customerEmail": request.customer_email or ticket_info.get("customerEmail"),
        "chatUrl": request.chat_url,
    }


@router.post(
    "/process-ticket",
    response_model=ProcessTicketResponse,
    dependencies=[Depends(require_api_key)],
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def process_ticket(
    request: ConversationInput,
    notion: AsyncClient = Depends(get_notion_client),
    extractor: TextCompletionProvider = Depends(get_extractor),
):
    if not request.conversation_text or not request.conversation_text.strip():
        raise ValidationError("Conversation text is required")

    ticket_info = await extract_ticket_info(request.conversation_text, extractor)

    ticket_id = await create_ticket_entry(notion, merge_ticket_data(ticket_info, request))

    # Enrichment below is best-effort; the ticket page already exists.
    known_issue = ticket_info.get("knownIssueIndication")
    if isinstance(known_issue, str) and known_issue.strip():
        link = await link_to_known_issue(notion, ticket_id, known_issue.strip())
        if not link.ok:
            logger.warning("Ticket %s left unlinked: %s", ticket_id, link.error)

    lessons = ticket_info.get("lessonsLearned")
    if isinstance(lessons, list) and lessons:
        created = await create_lessons_learned(notion, ticket_id, lessons)
        if not created.ok:
            logger.warning("Lessons for ticket %s not recorded: %s", ticket_id, created.error)

    return ProcessTicketResponse(ticket_info=ticket_info, notion_entry_id=ticket_id)

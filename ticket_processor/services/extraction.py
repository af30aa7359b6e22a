"""
Ticket Extraction Service
Asks the configured LLM provider to turn a support transcript into ticket fields.
"""
from __future__ import annotations

import json
import logging
import re

from ticket_processor.core.exceptions import ExtractionError
from ticket_processor.schemas.ticket_schema import TICKET_INFO_FIELDS, TicketInfo
from ticket_processor.services.llm_router import TextCompletionProvider

logger = logging.getLogger(__name__)

_EXTRACTION_PROMPT = """
Please analyze this support conversation and extract the following information in JSON format:

\"\"\"
{conversation_text}
\"\"\"

Please extract:
1. issueTitle (a brief title for the ticket)
2. issueSummary (1-2 sentence description)
3. category (Technical, Billing, Account, Feature Request, or Other)
4. priority (Low, Medium, or High)
5. rootCause (User Error, Bug, Configuration, Third-party Issue, Documentation, or Training)
6. resolutionSummary (how the issue was resolved)
7. timeSpent (estimated minutes)
8. isRecurring (true or false)
9. requiresFollowUp (true or false)
10. followUpDate (YYYY-MM-DD format, only if followUp is true)
11. tags (array of relevant keywords)
12. knownIssueIndication (name of the known issue if it appears to be one)
13. lessonsLearned (array of insights worth documenting)
14. customerName (if mentioned in conversation)
15. customerEmail (if mentioned in conversation)

Respond only with valid JSON, with no additional text."""

# Greedy: first "{" through the last "}" in the reply.
_JSON_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)


def build_extraction_prompt(conversation_text: str) -> str:
    return _EXTRACTION_PROMPT.format(conversation_text=conversation_text)


def parse_ticket_json(content: str) -> TicketInfo:
    """Pull the ticket object out of a free-text model reply.

    Only JSON-parseability is checked; field types and enum values pass through untouched.
    """
    match = _JSON_OBJECT_RE.search(content or "")
    if not match:
        raise ExtractionError("no JSON found")
    try:
        return json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise ExtractionError("malformed JSON") from e


async def extract_ticket_info(conversation_text: str, extractor: TextCompletionProvider) -> TicketInfo:
    prompt_text = build_extraction_prompt(conversation_text)

    try:
        content = await extractor.complete(prompt_text)
    except Exception as e:
        logger.exception("%s extraction call failed", extractor.provider)
        raise ExtractionError("provider call failed", summary=ExtractionError.PROVIDER_FAILURE) from e

    try:
        ticket_info = parse_ticket_json(content)
    except ExtractionError as e:
        logger.error("Error parsing %s response (%s): %.500s", extractor.provider, e.reason, content)
        raise

    missing = [f for f in TICKET_INFO_FIELDS if f not in ticket_info]
    if missing:
        logger.warning("%s reply is missing fields: %s", extractor.provider, ", ".join(missing))

    logger.info("Extracted ticket '%s' via %s", ticket_info.get("issueTitle", ""), extractor.provider)
    return ticket_info

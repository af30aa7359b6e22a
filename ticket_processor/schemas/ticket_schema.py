from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

# The extracted object is forwarded as the model returned it; no field or enum validation.
TicketInfo = Dict[str, Any]

TICKET_INFO_FIELDS = (
    "issueTitle",
    "issueSummary",
    "category",
    "priority",
    "rootCause",
    "resolutionSummary",
    "timeSpent",
    "isRecurring",
    "requiresFollowUp",
    "followUpDate",
    "tags",
    "knownIssueIndication",
    "lessonsLearned",
    "customerName",
    "customerEmail",
)


class ConversationInput(BaseModel):
    # Optional here so that a missing transcript is reported as a 400 by the handler, not a 422.
    conversation_text: Optional[str] = Field(default=None, alias="conversationText", description="Full chat transcript")
    customer_name: Optional[str] = Field(default=None, alias="customerName")
    customer_email: Optional[str] = Field(default=None, alias="customerEmail")
    chat_url: Optional[str] = Field(default=None, alias="chatUrl", description="Link to the original chat")

    model_config = ConfigDict(populate_by_name=True)


class ProcessTicketResponse(BaseModel):
    success: bool = True
    ticket_info: TicketInfo = Field(..., alias="ticketInfo")
    notion_entry_id: str = Field(..., alias="notionEntryId")

    model_config = ConfigDict(populate_by_name=True)


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str = "ok"

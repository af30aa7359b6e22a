import os

# Settings are read once at import; pin the webhook secret before the app module loads.
os.environ["API_SECRET_KEY"] = "test-secret"
os.environ.setdefault("NOTION_TICKETS_DATABASE_ID", "tickets-db")
os.environ.setdefault("NOTION_KNOWN_ISSUES_DATABASE_ID", "known-issues-db")
os.environ.setdefault("NOTION_LESSONS_DATABASE_ID", "lessons-db")

import copy
import json
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from ticket_processor.api.dependencies import get_extractor, get_notion_client
from ticket_processor.main import app


SAMPLE_TICKET_INFO: Dict[str, Any] = {
    "issueTitle": "Cannot log in after password reset",
    "issueSummary": "Customer could not log in after resetting their password. A stale session cookie was the cause.",
    "category": "Account",
    "priority": "Medium",
    "rootCause": "User Error",
    "resolutionSummary": "Asked the customer to clear cookies and log in again.",
    "timeSpent": 15,
    "isRecurring": False,
    "requiresFollowUp": True,
    "followUpDate": "2026-10-26",
    "tags": ["login", "password-reset", "cookies"],
    "knownIssueIndication": None,
    "lessonsLearned": [],
    "customerName": "Jordan Lee",
    "customerEmail": "jordan@example.com",
}


class FakeExtractor:
    """Stands in for a chat-model provider; replays a canned reply and records prompts."""

    def __init__(self, reply: str, provider: str = "fake", error: Optional[Exception] = None):
        self.provider = provider
        self.reply = reply
        self.error = error
        self.prompts: List[str] = []

    async def complete(self, prompt_text: str) -> str:
        self.prompts.append(prompt_text)
        if self.error is not None:
            raise self.error
        return self.reply


def ticket_info(**overrides: Any) -> Dict[str, Any]:
    info = copy.deepcopy(SAMPLE_TICKET_INFO)
    info.update(overrides)
    return info


def model_reply(info: Dict[str, Any]) -> str:
    return "Here is the extracted ticket:\n" + json.dumps(info, indent=2) + "\nLet me know if you need anything else."


@pytest.fixture
def mock_notion() -> MagicMock:
    """Provides a mock notion_client.AsyncClient."""
    notion = MagicMock()
    notion.pages.create = AsyncMock(return_value={"id": "ticket-page-1"})
    notion.pages.update = AsyncMock(return_value={"id": "ticket-page-1"})
    notion.databases.query = AsyncMock(return_value={"results": []})
    return notion


@pytest.fixture
def fake_extractor() -> FakeExtractor:
    return FakeExtractor(model_reply(ticket_info()))


@pytest.fixture
def client(mock_notion: MagicMock, fake_extractor: FakeExtractor):
    app.dependency_overrides[get_notion_client] = lambda: mock_notion
    app.dependency_overrides[get_extractor] = lambda: fake_extractor
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def auth_headers() -> Dict[str, str]:
    return {"Authorization": "Bearer test-secret"}

from fastapi import Request
from notion_client import AsyncClient

from ticket_processor.services.llm_router import TextCompletionProvider


def get_notion_client(request: Request) -> AsyncClient:
    """The Notion client opened by the app lifespan."""
    return request.app.state.notion


def get_extractor(request: Request) -> TextCompletionProvider:
    """
    The extraction provider resolved from AI_PROVIDER at startup.
    Resolved once; every request reuses the same provider.
    """
    return request.app.state.extractor

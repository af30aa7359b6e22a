from notion_client import AsyncClient

from ticket_processor.core.config import settings


def create_notion_client() -> AsyncClient:
    """Build the Notion client shared by every request for the app's lifetime.

    Closed by the lifespan hook in main.py.
    """
    return AsyncClient(auth=settings.NOTION_API_KEY)

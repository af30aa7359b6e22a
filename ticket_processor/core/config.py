from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import Optional

class Settings(BaseSettings):
    # ----------------------------------
    # App General Info
    # ----------------------------------
    PROJECT_NAME: str = "Support Ticket Processor"
    VERSION: str = "1.0.0"
    HOST: str = Field(default="0.0.0.0", description="Interface uvicorn binds to")
    PORT: int = Field(default=3000, description="Listen port")
    LOG_LEVEL: str = Field(default="INFO", description="Root logging level")

    # ----------------------------------
    # Webhook Auth (shared bearer secret)
    # ----------------------------------
    API_SECRET_KEY: Optional[str] = Field(
        default=None,
        description="Pre-shared secret expected in 'Authorization: Bearer <token>'. Unset rejects every request.",
    )

    # ----------------------------------
    # Notion
    # ----------------------------------
    NOTION_API_KEY: Optional[str] = Field(default=None, description="Notion integration token")
    NOTION_TICKETS_DATABASE_ID: str = Field(default="", description="Database receiving one page per ticket")
    NOTION_KNOWN_ISSUES_DATABASE_ID: str = Field(default="", description="Database of cataloged known issues")
    NOTION_LESSONS_DATABASE_ID: str = Field(default="", description="Database of lessons learned")
    NOTION_FOLLOW_UP_DATE_PROPERTY: Optional[str] = Field(
        default=None,
        description="Optional date property on the tickets database that receives followUpDate.",
    )
    LESSONS_DEFAULT_CATEGORY: str = Field(default="Technical", description="Category select value for new lessons")

    # ----------------------------------
    # LLM Providers
    # ----------------------------------
    AI_PROVIDER: str = Field(default="claude", description="Extraction provider: claude or openai")
    ANTHROPIC_API_KEY: Optional[str] = Field(default=None, description="API Key for Anthropic (claude provider)")
    CLAUDE_MODEL: str = Field(default="claude-3-7-sonnet-20250219", description="Anthropic chat model name")
    OPENAI_API_KEY: Optional[str] = Field(default=None, description="API Key for OpenAI (openai provider)")
    OPENAI_MODEL: str = Field(default="gpt-4", description="OpenAI chat model name")
    OPENAI_TEMPERATURE: float = Field(default=0.3)
    LLM_MAX_TOKENS: int = Field(default=1500, description="Max output tokens for the extraction call")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

settings = Settings()

class TicketProcessingError(Exception):
    """Base class for failures that abort a /process-ticket request."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(TicketProcessingError):
    status_code = 400


class ExtractionError(TicketProcessingError):
    """The LLM call failed or its reply could not be parsed."""

    PARSE_FAILURE = "Failed to parse structured data from the conversation"
    PROVIDER_FAILURE = "Failed to get a reply from the extraction provider"

    def __init__(self, reason: str, summary: str = PARSE_FAILURE):
        super().__init__(f"{summary}: {reason}")
        self.reason = reason


class PersistenceError(TicketProcessingError):
    """Creating the ticket page in Notion failed."""

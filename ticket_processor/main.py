from contextlib import asynccontextmanager
import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ticket_processor.core.config import settings
from ticket_processor.core.exceptions import TicketProcessingError
from ticket_processor.core.notion import create_notion_client
from ticket_processor.schemas.ticket_schema import HealthResponse
from ticket_processor.services.llm_router import build_extractor

# Routes
from ticket_processor.api.routes import tickets

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting up: resolving extraction provider and Notion client...")
    if not settings.API_SECRET_KEY:
        logger.warning("API_SECRET_KEY is not set; every /process-ticket request will be rejected.")

    app.state.extractor = build_extractor()
    app.state.notion = create_notion_client()
    try:
        yield
    finally:
        await app.state.notion.aclose()
        logger.info("Shutting down...")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    lifespan=lifespan,
)


@app.exception_handler(TicketProcessingError)
async def ticket_processing_error_handler(request: Request, exc: TicketProcessingError):
    if exc.status_code >= 500:
        logger.error("Error processing ticket: %s", exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)}, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request body") if errors else "Invalid request body"
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s", request.url.path)
    return JSONResponse(status_code=500, content={"error": str(exc)})


app.include_router(tickets.router, tags=["Tickets"])


@app.get("/health", response_model=HealthResponse)
def health():
    return HealthResponse()


def run() -> None:
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()

"""Health check HTTP app."""

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

HEALTH_TEXT = "Health check OK"

app = FastAPI(title="Flowise Slack Relay", docs_url=None, redoc_url=None, openapi_url=None)


@app.api_route(
    "/{path:path}",
    methods=["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    response_class=PlainTextResponse,
)
async def health(path: str = ""):
    """Any request on any path is a health probe."""
    return PlainTextResponse(HEALTH_TEXT)

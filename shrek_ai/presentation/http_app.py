"""FastAPI application: health probe plus SSE answer and chat streams.

Validation errors are reported with a status code before the stream opens.
Once headers are sent, failures travel as ``error`` events inside the stream
and the stream is always closed by the server.
"""

import json
import logging
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, StreamingResponse

from ..container import Container, container
from ..core.errors import ValidationError
from ..core.models.stream import StreamEvent
from ..core.services.answer_service import AnswerService
from ..core.services.chat_service import ChatService

logger = logging.getLogger(__name__)

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}


async def _read_body(request: Request) -> dict:
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return {}
    return body if isinstance(body, dict) else {}


async def _frames(events: AsyncIterator[StreamEvent]) -> AsyncIterator[str]:
    try:
        async for event in events:
            yield event.to_sse()
    finally:
        # Also runs when the client disconnects and the response is cancelled
        await events.aclose()
        logger.debug("SSE stream closed")


def _event_stream(events: AsyncIterator[StreamEvent]) -> StreamingResponse:
    return StreamingResponse(
        _frames(events), media_type="text/event-stream", headers=SSE_HEADERS
    )


def _bad_request(error: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": str(error)})


def create_app(app_container: Container | None = None) -> FastAPI:
    """Build the HTTP application.

    Args:
        app_container: Configured container, the module-level one by default.

    Returns:
        FastAPI app.
    """
    c = app_container if app_container is not None else container

    app = FastAPI(
        title="shrek-ai",
        description="Retrieval-augmented conversational assistant backend.",
        version="1.0.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health() -> dict:
        return {"ok": True}

    @app.post("/ask")
    async def ask(request: Request):
        body = await _read_body(request)
        try:
            run = c.resolve(AnswerService).start(body.get("question"))
        except ValidationError as e:
            return _bad_request(e)

        logger.info(f"/ask: '{run.question[:50]}...'")
        return _event_stream(run.events(request.is_disconnected))

    @app.post("/chat")
    async def chat(request: Request):
        body = await _read_body(request)
        service = c.resolve(ChatService)
        try:
            message, history = service.parse_request(body.get("message"), body.get("history"))
        except ValidationError as e:
            return _bad_request(e)

        logger.info(f"/chat: '{message[:50]}...' ({len(history.messages)} prior messages)")
        return _event_stream(service.events(history, message, request.is_disconnected))

    return app

"""Chat service - multi-turn replies over explicit conversation state."""

import asyncio
import logging
from typing import AsyncIterator, Optional

from ..errors import ContextUnavailable, CorpusLoadError, GenerationFailure, ValidationError
from ..models.chat import ChatHistory
from ..models.stream import StreamEvent
from ..protocols.llm import LLMProtocol
from .answer_service import CONTEXT_ERROR, ECHO_PREFIX, GENERATION_ERROR, DisconnectCheck
from .context_service import ContextService

logger = logging.getLogger(__name__)

INVALID_MESSAGE = "Missing or invalid message"


class ChatService:
    """Chat service that coordinates retrieval and a streamed LLM reply."""

    def __init__(
        self,
        llm: Optional[LLMProtocol],
        context_service: ContextService,
        history_limit: int = 20,
        timeout: Optional[float] = None,
    ):
        """Initialize chat service.

        Args:
            llm: LLM client. None selects the echo mode.
            context_service: Retrieval service.
            history_limit: Max messages kept in a conversation.
            timeout: Seconds to wait for each streamed token. None waits forever.
        """
        self._llm = llm
        self._context = context_service
        self._history_limit = history_limit
        self._timeout = timeout

    def parse_request(self, message: object, history: object) -> tuple[str, ChatHistory]:
        """Validate a chat request body.

        Raises:
            ValidationError: If the message or history is malformed.
        """
        if not isinstance(message, str) or not message.strip():
            raise ValidationError(INVALID_MESSAGE)
        if history is None:
            history = []
        if not isinstance(history, list):
            raise ValidationError("History must be a list")
        try:
            return message, ChatHistory.from_list(history, max_messages=self._history_limit)
        except ValueError as e:
            raise ValidationError(str(e)) from e

    async def stream_reply(
        self,
        history: ChatHistory,
        user_message: str,
    ) -> AsyncIterator[tuple[str, Optional[list[str]]]]:
        """Retrieve context and stream the assistant reply.

        Args:
            history: Conversation so far.
            user_message: User's message.

        Yields:
            Tuples of (token, sources). sources is only set on first yield.
        """
        results = await self._context.retrieve(user_message)
        sources = [r.title for r in results]
        context = "\n\n".join(r.content for r in results) or None

        yield ("", sources)

        if self._llm is None:
            yield (ECHO_PREFIX + user_message, None)
            return

        async for token in self._llm.chat_stream(
            user_message=user_message, context=context, history=history.to_list()
        ):
            yield (token, None)

    async def events(
        self,
        history: ChatHistory,
        user_message: str,
        is_disconnected: Optional[DisconnectCheck] = None,
    ) -> AsyncIterator[StreamEvent]:
        """Stream reply chunks, then the updated conversation.

        Yields:
            ``chunk`` events, then one ``done`` event carrying sources and the
            new history, or a terminal ``error`` event.
        """
        parts: list[str] = []
        reply = self.stream_reply(history, user_message)

        try:
            try:
                _, sources = await reply.__anext__()
            except (CorpusLoadError, ContextUnavailable) as e:
                logger.error(f"[chat] Context retrieval failed: {e}")
                yield StreamEvent.error(CONTEXT_ERROR, str(e))
                return
            except Exception as e:
                logger.exception("[chat] Unexpected context retrieval error")
                yield StreamEvent.error(CONTEXT_ERROR, str(e) or type(e).__name__)
                return

            while True:
                try:
                    token, _ = await asyncio.wait_for(reply.__anext__(), self._timeout)
                except StopAsyncIteration:
                    break
                except GenerationFailure as e:
                    logger.error(f"[chat] Generation failed: {e}")
                    yield StreamEvent.error(GENERATION_ERROR, str(e))
                    return
                except asyncio.TimeoutError:
                    logger.error(f"[chat] Reply timed out after {self._timeout}s")
                    yield StreamEvent.error(
                        GENERATION_ERROR, f"Reply timed out after {self._timeout}s"
                    )
                    return
                except Exception as e:
                    logger.exception("[chat] Unexpected generation error")
                    yield StreamEvent.error(GENERATION_ERROR, str(e) or type(e).__name__)
                    return
                if not token:
                    continue
                if is_disconnected is not None and await is_disconnected():
                    logger.info("[chat] Client disconnected, stopping stream")
                    return
                parts.append(token)
                yield StreamEvent.chunk(token)
        finally:
            await reply.aclose()

        updated = history.with_pair(user_message, "".join(parts), sources)
        yield StreamEvent(
            {
                "done": True,
                "sources": sources,
                "history": [m.to_dict() for m in updated.messages],
            }
        )

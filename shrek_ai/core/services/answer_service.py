"""Answer service - retrieval, prompt assembly, generation and segmentation."""

import asyncio
import logging
import re
from typing import AsyncIterator, Awaitable, Callable, Optional

from ..errors import ContextUnavailable, CorpusLoadError, GenerationFailure, ValidationError
from ..models.stream import AnswerState, StreamEvent
from ..protocols.llm import LLMProtocol
from .context_service import ContextService

logger = logging.getLogger(__name__)

ECHO_PREFIX = "You asked: "
INVALID_QUESTION = "Missing or invalid question"
GENERATION_ERROR = "Failed to generate answer"
CONTEXT_ERROR = "Failed to retrieve context"

_SENTENCE_BOUNDARY = re.compile(r"(?<=\.)\s+")

DisconnectCheck = Callable[[], Awaitable[bool]]


def validate_question(question: object) -> str:
    """Return the question if it is a non-empty string.

    Raises:
        ValidationError: Otherwise.
    """
    if not isinstance(question, str) or not question:
        raise ValidationError(INVALID_QUESTION)
    return question


def build_prompt(context: list[str], question: str) -> str:
    """Prepend retrieved context to the question, blank-line separated."""
    context_string = "\n\n".join(context)
    if not context_string:
        return question
    return context_string + "\n\n" + question


def split_segments(answer: str) -> list[str]:
    """Split an answer into sentence-like segments.

    A period followed by whitespace ends a segment. The period stays with
    its sentence, the whitespace is dropped.
    """
    segments = []
    for part in _SENTENCE_BOUNDARY.split(answer):
        part = part.strip()
        if part:
            segments.append(part)
    return segments


class AnswerRun:
    """A single question moving through the answer state machine."""

    def __init__(
        self,
        question: str,
        context_service: ContextService,
        llm: Optional[LLMProtocol],
        timeout: Optional[float] = None,
    ):
        self.question = question
        self.state = AnswerState.RECEIVED
        self._context = context_service
        self._llm = llm
        self._timeout = timeout

    def _transition(self, state: AnswerState) -> None:
        logger.debug(f"[answer] {self.state.value} -> {state.value}")
        self.state = state

    def _fail(self, message: str, details: str) -> StreamEvent:
        self._transition(AnswerState.ERROR_DURING_GENERATION)
        return StreamEvent.error(message, details)

    async def events(
        self, is_disconnected: Optional[DisconnectCheck] = None
    ) -> AsyncIterator[StreamEvent]:
        """Run the pipeline and yield stream events in order.

        Args:
            is_disconnected: Polled between segments; a true result stops
                the stream.

        Yields:
            Stream events. An error event is always the last one.
        """
        try:
            context = await self._context.get_context(self.question)
        except (CorpusLoadError, ContextUnavailable) as e:
            logger.error(f"[answer] Context retrieval failed: {e}")
            yield self._fail(CONTEXT_ERROR, str(e))
            return
        except Exception as e:
            logger.exception("[answer] Unexpected context retrieval error")
            yield self._fail(CONTEXT_ERROR, str(e) or type(e).__name__)
            return
        self._transition(AnswerState.CONTEXT_RETRIEVED)

        if self._llm is None:
            # Retrieved context is intentionally unused without a backend
            logger.info("[answer] No generative backend configured, echoing question")
            self._transition(AnswerState.COMPLETE)
            yield StreamEvent.answer(ECHO_PREFIX + self.question)
            return

        self._transition(AnswerState.GENERATING_PROMPT)
        prompt = build_prompt(context, self.question)

        try:
            answer = await asyncio.wait_for(self._llm.generate(prompt), self._timeout)
        except GenerationFailure as e:
            logger.error(f"[answer] Generation failed: {e}")
            yield self._fail(GENERATION_ERROR, str(e))
            return
        except asyncio.TimeoutError:
            logger.error(f"[answer] Generation timed out after {self._timeout}s")
            yield self._fail(GENERATION_ERROR, f"Generation timed out after {self._timeout}s")
            return
        except Exception as e:
            logger.exception("[answer] Unexpected generation error")
            yield self._fail(GENERATION_ERROR, str(e) or type(e).__name__)
            return

        self._transition(AnswerState.STREAMING_SEGMENTS)
        for segment in split_segments(answer):
            if is_disconnected is not None and await is_disconnected():
                logger.info("[answer] Client disconnected, stopping stream")
                return
            yield StreamEvent.segment(segment)

        self._transition(AnswerState.COMPLETE)


class AnswerService:
    """Answer questions with retrieved context, as a stream of events."""

    def __init__(
        self,
        context_service: ContextService,
        llm: Optional[LLMProtocol] = None,
        timeout: Optional[float] = None,
    ):
        """Initialize answer service.

        Args:
            context_service: Retrieval service.
            llm: Generative backend. None selects the echo mode.
            timeout: Seconds allowed for generation.
        """
        self._context = context_service
        self._llm = llm
        self._timeout = timeout

    @property
    def configured(self) -> bool:
        return self._llm is not None

    def start(self, question: object) -> AnswerRun:
        """Validate a question and prepare its run.

        Raises:
            ValidationError: If the question is not a non-empty string.
        """
        return AnswerRun(validate_question(question), self._context, self._llm, self._timeout)

    async def answer(self, question: object) -> AsyncIterator[StreamEvent]:
        """Validate and stream the answer to a question."""
        run = self.start(question)
        async for event in run.events():
            yield event

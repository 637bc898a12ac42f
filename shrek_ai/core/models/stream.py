"""Streamed answer events."""
import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class AnswerState(Enum):
    """Lifecycle of a single answer stream."""
    RECEIVED = "received"
    CONTEXT_RETRIEVED = "context_retrieved"
    GENERATING_PROMPT = "generating_prompt"
    STREAMING_SEGMENTS = "streaming_segments"
    COMPLETE = "complete"
    ERROR_DURING_GENERATION = "error_during_generation"


@dataclass(frozen=True)
class StreamEvent:
    """One SSE frame worth of payload."""
    payload: dict[str, Any]

    @classmethod
    def answer(cls, text: str) -> "StreamEvent":
        return cls({"answer": text})

    @classmethod
    def segment(cls, text: str) -> "StreamEvent":
        return cls({"segment": text})

    @classmethod
    def chunk(cls, text: str) -> "StreamEvent":
        return cls({"chunk": text})

    @classmethod
    def error(cls, message: str, details: Optional[str] = None) -> "StreamEvent":
        payload: dict[str, Any] = {"error": message}
        if details is not None:
            payload["details"] = details
        return cls(payload)

    @property
    def is_error(self) -> bool:
        return "error" in self.payload

    def to_sse(self) -> str:
        """Encode as a ``data: <json>`` frame."""
        return "data: " + json.dumps(self.payload, ensure_ascii=False) + "\n\n"

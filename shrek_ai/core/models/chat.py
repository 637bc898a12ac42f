"""Chat domain models."""
from dataclasses import dataclass, field, replace

ROLES = ("user", "assistant")


@dataclass(frozen=True)
class ChatMessage:
    """Chat message."""
    role: str  # "user" | "assistant"
    content: str
    sources: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        data: dict = {"role": self.role, "content": self.content}
        if self.sources:
            data["sources"] = list(self.sources)
        return data


@dataclass(frozen=True)
class ChatHistory:
    """Conversation state passed explicitly into and out of each turn."""
    messages: tuple[ChatMessage, ...] = field(default_factory=tuple)
    max_messages: int = 20

    def appended(self, *new_messages: ChatMessage) -> "ChatHistory":
        """Return a new history with messages added, trimmed to the limit."""
        messages = self.messages + tuple(new_messages)
        if len(messages) > self.max_messages:
            messages = messages[-self.max_messages:]
        return replace(self, messages=messages)

    def with_pair(
        self,
        user_content: str,
        assistant_content: str,
        sources: list[str] | None = None,
    ) -> "ChatHistory":
        """Return a new history with a user/assistant message pair."""
        return self.appended(
            ChatMessage(role="user", content=user_content),
            ChatMessage(
                role="assistant",
                content=assistant_content,
                sources=tuple(sources or ()),
            ),
        )

    def to_list(self) -> list[dict]:
        """Convert to list of dicts for LLM."""
        return [{"role": m.role, "content": m.content} for m in self.messages]

    @classmethod
    def from_list(cls, items: list[dict], max_messages: int = 20) -> "ChatHistory":
        """Build history from client-supplied dicts.

        Args:
            items: Messages as ``{"role", "content", "sources"?}`` dicts.
            max_messages: History limit.

        Raises:
            ValueError: If an item has an unknown role, non-string content or
                sources that are not a list of strings.
        """
        messages = []
        for item in items:
            if not isinstance(item, dict):
                raise ValueError("History entries must be objects")
            role = item.get("role")
            content = item.get("content")
            if role not in ROLES or not isinstance(content, str):
                raise ValueError(f"Invalid history entry: {item!r}")
            sources = item.get("sources")
            if sources is None:
                sources = []
            if not isinstance(sources, list) or not all(isinstance(s, str) for s in sources):
                raise ValueError(f"History sources must be a list of strings: {item!r}")
            messages.append(ChatMessage(role=role, content=content, sources=tuple(sources)))
        return cls(max_messages=max_messages).appended(*messages)

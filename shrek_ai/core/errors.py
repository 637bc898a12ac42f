"""Domain errors."""


class ShrekAIError(Exception):
    """Base class for all pipeline errors."""


class ValidationError(ShrekAIError):
    """Malformed client input, reported before any stream is opened."""


class CorpusLoadError(ShrekAIError):
    """The document corpus could not be read or parsed."""


class EmbeddingUnavailable(ShrekAIError):
    """The embedding backend failed or returned no vector."""


class ContextUnavailable(ShrekAIError):
    """Context for a question could not be retrieved."""


class GenerationFailure(ShrekAIError):
    """The generative backend failed to produce an answer."""

"""Error taxonomy for the query engine."""


class DocQueryError(Exception):
    """Base class for query engine errors."""
    pass


class EmbeddingFailure(DocQueryError):
    """Raised when the embedding service fails or returns an unusable vector."""
    pass


class GenerationFailure(DocQueryError):
    """Raised when the generation service fails or returns unparseable output."""
    pass


class QueryValidationError(DocQueryError):
    """Raised when a question is empty or too long."""
    pass


class QueryProcessingError(DocQueryError):
    """Opaque failure surfaced to callers of the query engine."""
    pass

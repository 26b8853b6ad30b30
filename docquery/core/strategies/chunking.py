
import logging
import re

from ..models.document import Chunk, Document

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 1000
SENTENCE_SEPARATOR = ". "

_SENTENCE_END = re.compile(r"[.!?]+")


def split_sentences(text: str) -> list[str]:
    """Split text on sentence-ending punctuation, dropping blank units."""
    return [s.strip() for s in _SENTENCE_END.split(text) if s.strip()]


class Chunker:
    """Sentence-bounded chunker.

    Sentences are packed into a buffer until the next one would push it past
    the target size. A sentence longer than the target becomes its own chunk
    untouched.
    """

    def __init__(self, target_size: int = DEFAULT_CHUNK_SIZE):
        """Initialize chunker.

        Args:
            target_size: Target chunk size in characters.
        """
        if target_size < 1:
            raise ValueError(f"target_size must be positive, got {target_size}")
        self._target_size = target_size

    @property
    def target_size(self) -> int:
        return self._target_size

    def chunk(self, text: str) -> list[str]:
        """Split text into chunks.

        Args:
            text: Raw document text.

        Returns:
            Ordered chunks, empty for blank input.
        """
        chunks: list[str] = []
        buffer = ""

        for sentence in split_sentences(text):
            needed = len(buffer) + len(SENTENCE_SEPARATOR) + len(sentence)
            if buffer and needed > self._target_size:
                chunks.append(buffer)
                buffer = sentence
            elif buffer:
                buffer += SENTENCE_SEPARATOR + sentence
            else:
                buffer = sentence

        if buffer:
            chunks.append(buffer)

        return chunks

    def chunk_document(self, document: Document) -> list[Chunk]:
        """Chunk a document, keeping its identity on every chunk."""
        texts = self.chunk(document.content or "")
        logger.debug(f"Chunked '{document.name}' into {len(texts)} chunks")
        return [
            Chunk(
                document_id=document.id,
                document_name=document.name,
                content=text,
                position=i,
            )
            for i, text in enumerate(texts)
        ]

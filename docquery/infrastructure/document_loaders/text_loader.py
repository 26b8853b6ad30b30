import logging
from datetime import datetime, timezone
from pathlib import Path

from docquery.core.models.document import Document

logger = logging.getLogger(__name__)


class TextLoader:

    EXTENSIONS = {".txt", ".md", ".markdown"}

    def supports(self, file_path: Path) -> bool:
        return file_path.suffix.lower() in self.EXTENSIONS

    def load(self, file_path: Path) -> str:
        return file_path.read_text(encoding="utf-8")


class DirectoryDocumentProvider:
    """Reads text documents from a folder as Document snapshots."""

    def __init__(self, docs_path: str | Path, loader: TextLoader | None = None):
        self._docs_path = Path(docs_path)
        self._loader = loader or TextLoader()

    def load(self) -> list[Document]:
        """Load supported files, ids assigned in file name order."""
        if not self._docs_path.is_dir():
            logger.error(f"Docs path not found: {self._docs_path}")
            return []

        files = sorted(
            (p for p in self._docs_path.iterdir() if p.is_file() and self._loader.supports(p)),
            key=lambda p: p.name,
        )

        documents = []
        for i, file_path in enumerate(files, 1):
            try:
                content = self._loader.load(file_path)
            except (OSError, UnicodeDecodeError) as e:
                logger.error(f"Failed to load {file_path}: {e}")
                continue

            documents.append(
                Document(
                    id=i,
                    name=file_path.name,
                    content=content,
                    modified_at=datetime.fromtimestamp(
                        file_path.stat().st_mtime, tz=timezone.utc
                    ),
                )
            )

        logger.info(f"Loaded {len(documents)} documents from {self._docs_path}")
        return documents

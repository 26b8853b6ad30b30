"""Document loader implementations."""
from .text_loader import DirectoryDocumentProvider, TextLoader

__all__ = ["TextLoader", "DirectoryDocumentProvider"]

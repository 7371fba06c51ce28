from .extract import EmptyDocumentError, UnsupportedFileTypeError, extract_text
from .models import ExtractedText

__all__ = ["EmptyDocumentError", "ExtractedText", "UnsupportedFileTypeError", "extract_text"]

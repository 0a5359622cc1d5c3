"""
Data models handed to the document renderer
"""

from .document_kind import DocumentKind
from .printable_line import PrintableLine
from .printable_document import PrintableDocument

__all__ = ["DocumentKind", "PrintableLine", "PrintableDocument"]

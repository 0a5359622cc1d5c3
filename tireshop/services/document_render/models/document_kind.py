"""
Document kind enumeration
"""

from enum import Enum


class DocumentKind(str, Enum):
    INVOICE = "INVOICE"
    QUOTATION = "QUOTATION"

"""Document schema package — typed models for document content.

Provides the contract between document descriptions and the builder:

- models.py: Content element dataclasses (PageTitle, Table, PieChart, etc.)
- formatting.py: Locale-independent numeric formatting
- loader.py: YAML serialization/deserialization of DocumentSpec
"""

from .formatting import format_inches, pie_percentage
from .models import (
    COLUMN_ELEMENT_KINDS,
    ELEMENT_TYPES,
    BarChart,
    ColumnLayout,
    ContentElement,
    Directive,
    DirectiveType,
    DocumentSpec,
    ElementKind,
    GraphValue,
    Image,
    ListBlock,
    ListType,
    MarginSpec,
    PageTitle,
    Paragraph,
    PieChart,
    Table,
    TextRun,
    TextTitle,
    element_from_dict,
)
from .loader import load_document, save_document

__all__ = [
    # Models
    "BarChart",
    "ColumnLayout",
    "ContentElement",
    "Directive",
    "DirectiveType",
    "DocumentSpec",
    "ElementKind",
    "GraphValue",
    "Image",
    "ListBlock",
    "ListType",
    "MarginSpec",
    "PageTitle",
    "Paragraph",
    "PieChart",
    "Table",
    "TextRun",
    "TextTitle",
    "COLUMN_ELEMENT_KINDS",
    "ELEMENT_TYPES",
    "element_from_dict",
    # Loader
    "load_document",
    "save_document",
    # Formatting
    "format_inches",
    "pie_percentage",
]

"""Document models - the content elements a DocumentBuilder can serialize.

Defines the closed set of element variants (titles, text, lists, images,
tables, charts, column layouts), the margin and chart-value primitives they
are built from, and the DocumentSpec that ties a whole document description
together for the YAML loader and the CLI.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Union

from texdoc.errors import ConfigurationError


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class ElementKind(Enum):
    """Every kind of content element the builder knows how to serialize."""
    PAGE_TITLE = "page_title"    # \title + \maketitle, followed by a new page
    TEXT = "text"                # Plain or format-string text run
    PARAGRAPH = "paragraph"      # \paragraph heading + body
    LIST = "list"                # itemize / enumerate / description
    IMAGE = "image"              # Wrapped figure, copied into images/
    TEXT_TITLE = "text_title"    # Sized heading line + \newline
    COLUMNS = "columns"          # multicols container
    TABLE = "table"              # tabular grid
    PIE_CHART = "pie_chart"      # pgf-pie chart
    BAR_CHART = "bar_chart"      # pgfplots ybar chart


class ListType(Enum):
    """LaTeX list environments."""
    ITEMIZE = "itemize"
    ENUMERATE = "enumerate"
    DESCRIPTION = "description"


class DirectiveType(Enum):
    """Raw and layout operations that are not content elements."""
    RAW = "raw"
    MATH = "math"
    NEW_LINE = "new_line"
    NEW_PAGE = "new_page"
    FILL = "fill"
    START_CENTER = "start_center"
    END_ALIGN = "end_align"


# ---------------------------------------------------------------------------
# Primitives
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MarginSpec:
    """Page margins in inches."""
    top: float = 0.0
    bottom: float = 0.0
    left: float = 0.0
    right: float = 0.0

    def __post_init__(self):
        for name in ("top", "bottom", "left", "right"):
            if getattr(self, name) < 0:
                raise ConfigurationError(
                    f"Margin '{name}' must be non-negative, got {getattr(self, name)}"
                )

    def to_dict(self) -> dict:
        return {"top": self.top, "bottom": self.bottom,
                "left": self.left, "right": self.right}

    @classmethod
    def from_dict(cls, d: dict) -> "MarginSpec":
        return cls(top=d.get("top", 0.0), bottom=d.get("bottom", 0.0),
                   left=d.get("left", 0.0), right=d.get("right", 0.0))


@dataclass(frozen=True)
class GraphValue:
    """A single labeled data point of a chart."""
    label: str
    value: int
    color: str | None = None   # Any xcolor name, e.g. "blue!60"

    def to_dict(self) -> dict:
        d: dict[str, Any] = {"label": self.label, "value": self.value}
        if self.color:
            d["color"] = self.color
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "GraphValue":
        return cls(label=str(d["label"]), value=int(d["value"]),
                   color=d.get("color"))


# ---------------------------------------------------------------------------
# Content elements
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PageTitle:
    """Document title page: title, optional date and author."""
    kind: ClassVar[ElementKind] = ElementKind.PAGE_TITLE

    title: str
    date: str | None = None
    author: str | None = None

    def to_dict(self) -> dict:
        d: dict[str, Any] = {"type": self.kind.value, "title": self.title}
        if self.date is not None:
            d["date"] = self.date
        if self.author is not None:
            d["author"] = self.author
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "PageTitle":
        return cls(title=d["title"], date=d.get("date"), author=d.get("author"))


@dataclass(frozen=True)
class TextRun:
    """A line of text, optionally substituted into a format string.

    ``format`` holds a single ``str.format`` placeholder, e.g.
    ``"\\textbf{{{}}}"``.
    """
    kind: ClassVar[ElementKind] = ElementKind.TEXT

    text: str
    format: str | None = None

    def to_dict(self) -> dict:
        d: dict[str, Any] = {"type": self.kind.value, "text": self.text}
        if self.format is not None:
            d["format"] = self.format
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "TextRun":
        return cls(text=d["text"], format=d.get("format"))


@dataclass(frozen=True)
class Paragraph:
    """A headed paragraph."""
    kind: ClassVar[ElementKind] = ElementKind.PARAGRAPH

    heading: str
    text: str

    def to_dict(self) -> dict:
        return {"type": self.kind.value, "heading": self.heading, "text": self.text}

    @classmethod
    def from_dict(cls, d: dict) -> "Paragraph":
        return cls(heading=d["heading"], text=d["text"])


@dataclass(frozen=True)
class ListBlock:
    """A list environment.

    Either ``items`` (plain entries) or ``descriptive_items`` (term ->
    description pairs, given as a dict or pairs, kept in order) is used;
    descriptive items win when both are given.
    """
    kind: ClassVar[ElementKind] = ElementKind.LIST

    list_type: ListType = ListType.ITEMIZE
    items: tuple[str, ...] = ()
    descriptive_items: tuple[tuple[str, str], ...] | None = None

    def __post_init__(self):
        object.__setattr__(self, "list_type", ListType(self.list_type))
        object.__setattr__(self, "items", tuple(self.items))
        if self.descriptive_items is not None:
            pairs = self.descriptive_items
            if isinstance(pairs, dict):
                pairs = pairs.items()
            object.__setattr__(self, "descriptive_items",
                               tuple((str(k), str(v)) for k, v in pairs))

    def to_dict(self) -> dict:
        d: dict[str, Any] = {"type": self.kind.value,
                             "list_type": self.list_type.value}
        if self.descriptive_items is not None:
            d["descriptive_items"] = dict(self.descriptive_items)
        else:
            d["items"] = list(self.items)
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "ListBlock":
        return cls(
            list_type=ListType(d.get("list_type", "itemize")),
            items=tuple(d.get("items", ())),
            descriptive_items=d.get("descriptive_items"),
        )


@dataclass(frozen=True)
class Image:
    """An image file, copied into the document's images folder when added."""
    kind: ClassVar[ElementKind] = ElementKind.IMAGE

    path: str
    caption: str | None = None

    def to_dict(self) -> dict:
        d: dict[str, Any] = {"type": self.kind.value, "path": str(self.path)}
        if self.caption is not None:
            d["caption"] = self.caption
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "Image":
        return cls(path=d["path"], caption=d.get("caption"))


@dataclass(frozen=True)
class TextTitle:
    """A heading line with an optional LaTeX size command (``\\Large``)."""
    kind: ClassVar[ElementKind] = ElementKind.TEXT_TITLE

    text: str
    size: str | None = None

    def to_dict(self) -> dict:
        d: dict[str, Any] = {"type": self.kind.value, "text": self.text}
        if self.size is not None:
            d["size"] = self.size
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "TextTitle":
        return cls(text=d["text"], size=d.get("size"))


@dataclass(frozen=True)
class Table:
    """A rectangular grid of cells, indexed ``cells[row][col]``."""
    kind: ClassVar[ElementKind] = ElementKind.TABLE

    cells: tuple[tuple[str, ...], ...]
    borders: bool = True
    wrap: bool = False

    def __post_init__(self):
        cells = tuple(tuple(str(c) for c in row) for row in self.cells)
        widths = {len(row) for row in cells}
        if len(widths) > 1:
            raise ValueError(
                f"Table rows must all have the same column count, got {sorted(widths)}"
            )
        object.__setattr__(self, "cells", cells)

    @property
    def row_count(self) -> int:
        return len(self.cells)

    @property
    def column_count(self) -> int:
        return len(self.cells[0]) if self.cells else 0

    def to_dict(self) -> dict:
        return {
            "type": self.kind.value,
            "cells": [list(row) for row in self.cells],
            "borders": self.borders,
            "wrap": self.wrap,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "Table":
        return cls(cells=d.get("cells", ()), borders=d.get("borders", True),
                   wrap=d.get("wrap", False))


@dataclass(frozen=True)
class PieChart:
    """Pie chart; each value becomes a slice labeled with its percentage."""
    kind: ClassVar[ElementKind] = ElementKind.PIE_CHART

    values: tuple[GraphValue, ...]

    def __post_init__(self):
        object.__setattr__(self, "values", tuple(self.values))

    @property
    def total(self) -> int:
        return sum(v.value for v in self.values)

    def to_dict(self) -> dict:
        return {"type": self.kind.value,
                "values": [v.to_dict() for v in self.values]}

    @classmethod
    def from_dict(cls, d: dict) -> "PieChart":
        return cls(values=tuple(GraphValue.from_dict(v) for v in d.get("values", [])))


@dataclass(frozen=True)
class BarChart:
    """Vertical bar chart over symbolic x coordinates."""
    kind: ClassVar[ElementKind] = ElementKind.BAR_CHART

    values: tuple[GraphValue, ...]
    bar_color: str = "blue"

    def __post_init__(self):
        object.__setattr__(self, "values", tuple(self.values))

    def to_dict(self) -> dict:
        return {"type": self.kind.value,
                "values": [v.to_dict() for v in self.values],
                "bar_color": self.bar_color}

    @classmethod
    def from_dict(cls, d: dict) -> "BarChart":
        return cls(values=tuple(GraphValue.from_dict(v) for v in d.get("values", [])),
                   bar_color=d.get("bar_color", "blue"))


@dataclass(frozen=True)
class ColumnLayout:
    """Side-by-side columns, one per nested element.

    Only tables, text runs, images, paragraphs and charts may be nested.
    """
    kind: ClassVar[ElementKind] = ElementKind.COLUMNS

    elements: tuple["ContentElement", ...]

    def __post_init__(self):
        object.__setattr__(self, "elements", tuple(self.elements))

    def to_dict(self) -> dict:
        return {"type": self.kind.value,
                "elements": [e.to_dict() for e in self.elements]}

    @classmethod
    def from_dict(cls, d: dict) -> "ColumnLayout":
        return cls(elements=tuple(element_from_dict(e) for e in d.get("elements", [])))


ContentElement = Union[
    PageTitle, TextRun, Paragraph, ListBlock, Image,
    TextTitle, ColumnLayout, Table, PieChart, BarChart,
]

ELEMENT_TYPES: dict[ElementKind, type] = {
    ElementKind.PAGE_TITLE: PageTitle,
    ElementKind.TEXT: TextRun,
    ElementKind.PARAGRAPH: Paragraph,
    ElementKind.LIST: ListBlock,
    ElementKind.IMAGE: Image,
    ElementKind.TEXT_TITLE: TextTitle,
    ElementKind.COLUMNS: ColumnLayout,
    ElementKind.TABLE: Table,
    ElementKind.PIE_CHART: PieChart,
    ElementKind.BAR_CHART: BarChart,
}

# Kinds that may appear inside a ColumnLayout
COLUMN_ELEMENT_KINDS = frozenset({
    ElementKind.TABLE,
    ElementKind.TEXT,
    ElementKind.IMAGE,
    ElementKind.PARAGRAPH,
    ElementKind.PIE_CHART,
    ElementKind.BAR_CHART,
})


def element_from_dict(d: dict) -> ContentElement:
    """Build a content element from its dict form, dispatching on ``type``."""
    try:
        kind = ElementKind(d["type"])
    except (KeyError, ValueError):
        raise ValueError(f"Unknown element type: {d.get('type')!r}") from None
    return ELEMENT_TYPES[kind].from_dict(d)


# ---------------------------------------------------------------------------
# Directives and document description
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Directive:
    """A raw or layout operation in a document body (new page, raw text...)."""
    command: DirectiveType
    text: str | None = None

    def __post_init__(self):
        object.__setattr__(self, "command", DirectiveType(self.command))
        if self.command in (DirectiveType.RAW, DirectiveType.MATH) and self.text is None:
            raise ValueError(f"Directive '{self.command.value}' requires text")

    def to_dict(self) -> dict:
        d: dict[str, Any] = {"directive": self.command.value}
        if self.text is not None:
            d["text"] = self.text
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "Directive":
        return cls(command=DirectiveType(d["directive"]), text=d.get("text"))


BodyItem = Union[ContentElement, Directive]


@dataclass
class DocumentSpec:
    """A complete document description: builder configuration plus body.

    This is what ``texdoc.schema.loader`` reads from YAML and what the CLI
    turns into a rendered document.
    """
    executable: str                      # Renderer executable, e.g. "pdflatex"
    folder: str                          # Resource folder (no spaces)
    margins: MarginSpec = field(default_factory=MarginSpec)
    packages: list[str] = field(default_factory=list)
    output_name: str | None = None       # Defaults to a timestamp at render time
    body: list[BodyItem] = field(default_factory=list)

    def elements(self) -> list[ContentElement]:
        """Return only the content elements of the body."""
        return [item for item in self.body if not isinstance(item, Directive)]

    def to_dict(self) -> dict:
        d: dict[str, Any] = {
            "executable": self.executable,
            "folder": self.folder,
            "margins": self.margins.to_dict(),
        }
        if self.packages:
            d["packages"] = list(self.packages)
        if self.output_name:
            d["output_name"] = self.output_name
        d["body"] = [item.to_dict() for item in self.body]
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "DocumentSpec":
        body: list[BodyItem] = []
        for item in d.get("body") or []:
            if "directive" in item:
                body.append(Directive.from_dict(item))
            else:
                body.append(element_from_dict(item))
        return cls(
            executable=d["executable"],
            folder=str(d["folder"]),
            margins=MarginSpec.from_dict(d.get("margins") or {}),
            packages=list(d.get("packages") or []),
            output_name=d.get("output_name"),
            body=body,
        )

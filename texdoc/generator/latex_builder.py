"""LaTeX builder engine — accumulates content elements into a markup buffer.

Owns the resource folder (markup sources, rendered artifacts and an
``images/`` subfolder), the document preamble (margins, extra packages)
and one serialization rule per content element. Rendering hands the
finished markup to an external renderer (``pdflatex`` by default) through
a narrow collaborator, see ``texdoc.generator.renderer``.

Usage::

    from texdoc.generator.latex_builder import DocumentBuilder
    from texdoc.schema.models import MarginSpec, PageTitle, Paragraph

    builder = DocumentBuilder("pdflatex", "build/report",
                              margins=MarginSpec(top=1, bottom=1))
    builder.add(PageTitle("Quarterly summary", author="Finance"))
    builder.add(Paragraph("Overview", "Revenue grew in every region."))
    exit_code = builder.render("summary")
"""

import logging
import shutil
from datetime import datetime
from pathlib import Path
from typing import Callable

from texdoc.errors import ConfigurationError, ResourceIOError, UnsupportedElementError
from texdoc.generator.charts import bar_chart_lines, pie_chart_lines
from texdoc.generator.renderer import ProcessRenderer, Renderer
from texdoc.schema.formatting import format_inches
from texdoc.schema.models import (
    COLUMN_ELEMENT_KINDS,
    BarChart,
    ColumnLayout,
    ContentElement,
    Directive,
    DirectiveType,
    DocumentSpec,
    ElementKind,
    Image,
    ListBlock,
    MarginSpec,
    PageTitle,
    Paragraph,
    PieChart,
    Table,
    TextRun,
    TextTitle,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

IMAGE_SUBFOLDER = "images"
MARKUP_EXTENSION = ".tex"
ARTIFACT_EXTENSION = ".pdf"
TIMESTAMP_FORMAT = "%y%m%d-%H%M%S"

BEGIN_DOCUMENT = r"\begin{document}"
END_DOCUMENT = r"\end{document}"
NEW_LINE = r"\newline"
NEW_PAGE = r"\newpage"
FILL = r"\vfill"
BEGIN_CENTER = r"\begin{center}"
END_CENTER = r"\end{center}"

_WRAPFIGURE_OPEN = [r"\begin{wrapfigure}{R}{0.3\textwidth}", r"\centering"]
_WRAPFIGURE_CLOSE = r"\end{wrapfigure}"


# ---------------------------------------------------------------------------
# DocumentBuilder
# ---------------------------------------------------------------------------

class DocumentBuilder:
    """Builds a LaTeX document and renders it with an external executable.

    Parameters
    ----------
    executable : str
        Path (or PATH name) of the renderer, e.g. ``pdflatex``.
    folder : str | Path
        Resource folder holding the markup, artifacts and ``images/``.
        Must not contain spaces; created if missing.
    margins : MarginSpec, optional
        Page margins in inches (default: all zero).
    packages : list[str], optional
        Extra preamble lines, appended verbatim after the geometry package.
    renderer : Renderer, optional
        Process collaborator (default: ``ProcessRenderer``).
    """

    # Exhaustive: every ElementKind must have a serializer here.
    _SERIALIZERS: dict[ElementKind, str] = {
        ElementKind.PAGE_TITLE: "_page_title_lines",
        ElementKind.TEXT: "_text_lines",
        ElementKind.PARAGRAPH: "_paragraph_lines",
        ElementKind.LIST: "_list_lines",
        ElementKind.IMAGE: "_image_lines",
        ElementKind.TEXT_TITLE: "_text_title_lines",
        ElementKind.COLUMNS: "_columns_lines",
        ElementKind.TABLE: "_table_lines",
        ElementKind.PIE_CHART: "_pie_chart_lines",
        ElementKind.BAR_CHART: "_bar_chart_lines",
    }

    def __init__(self, executable: str, folder: str | Path,
                 margins: MarginSpec | None = None,
                 packages: list[str] | None = None,
                 renderer: Renderer | None = None) -> None:
        if " " in str(folder):
            raise ConfigurationError(f"Folder path can't contain spaces: {folder!r}")

        self.executable = str(executable)
        self.folder = Path(folder)
        self.image_folder = self.folder / IMAGE_SUBFOLDER
        self.margins = margins if margins is not None else MarginSpec()
        self.packages = list(packages or [])
        self.renderer = renderer if renderer is not None else ProcessRenderer()
        self._lines: list[str] = []

        self._init_document()

    # ------------------------------------------------------------------
    # Buffer lifecycle
    # ------------------------------------------------------------------

    def _init_document(self) -> None:
        """Create the resource folders and reset the buffer to the preamble."""
        self.folder.mkdir(parents=True, exist_ok=True)
        self.image_folder.mkdir(parents=True, exist_ok=True)
        self._lines = self._preamble_lines()
        logger.debug("Initialized document in %s", self.folder)

    def _preamble_lines(self) -> list[str]:
        image_path = self.image_folder.resolve().as_posix().rstrip("/") + "/"
        m = self.margins
        # lmargin takes the right margin and rmargin the left one.
        geometry = (
            r"\usepackage["
            f"tmargin={format_inches(m.top)}in,"
            f"bmargin={format_inches(m.bottom)}in,"
            f"lmargin={format_inches(m.right)}in,"
            f"rmargin={format_inches(m.left)}in"
            "]{geometry}"
        )
        lines = [
            r"\documentclass{article}",
            r"\usepackage[utf8]{inputenc}",
            r"\usepackage{graphicx}",
            r"\graphicspath{{" + image_path + "}}",
            r"\usepackage{multicol}",
            r"\usepackage{pgf-pie}",
            r"\usepackage{pgfplots}",
            r"\usepackage{wrapfig}",
            r"\usepackage{mathtools}",
            r"\pgfplotsset{compat=1.15}",
            geometry,
        ]
        lines.extend(self.packages)
        lines.append(BEGIN_DOCUMENT)
        return lines

    def recreate(self, text: str | None = None) -> None:
        """Discard everything appended so far.

        With ``text`` that text becomes the only buffer line (no preamble);
        like any other line, ``to_string`` follows it with a line break
        before the closing marker. Without it the preamble is regenerated
        from the original configuration, as if the builder had just been constructed.
        """
        if text is not None:
            self._lines = [text]
        else:
            self._init_document()

    @property
    def lines(self) -> tuple[str, ...]:
        """Current buffer lines, without the closing marker."""
        return tuple(self._lines)

    def _buffer_text(self) -> str:
        return "".join(line + "\n" for line in self._lines)

    def to_string(self) -> str:
        """Buffer contents plus the closing marker, without rendering."""
        return self._buffer_text() + END_DOCUMENT

    def __str__(self) -> str:
        return self.to_string()

    # ------------------------------------------------------------------
    # Element dispatch
    # ------------------------------------------------------------------

    def add(self, element: ContentElement) -> None:
        """Serialize ``element`` and append it to the buffer.

        The element's lines are committed only once all of them have been
        produced, so a failing element leaves the buffer untouched.
        """
        lines = self._serialize(element)
        self._lines.extend(lines)
        logger.debug("Added %s (%d lines)", element.kind.value, len(lines))

    def _serialize(self, element: ContentElement) -> list[str]:
        kind = getattr(element, "kind", None)
        method_name = self._SERIALIZERS.get(kind) if isinstance(kind, ElementKind) else None
        if method_name is None:
            raise UnsupportedElementError(
                f"Can't add non-document object: {type(element).__name__}"
            )
        serializer: Callable[[ContentElement], list[str]] = getattr(self, method_name)
        return serializer(element)

    def apply(self, directive: Directive) -> None:
        """Run a raw/layout directive from a document description."""
        actions = {
            DirectiveType.RAW: lambda: self.add_raw_text(directive.text),
            DirectiveType.MATH: lambda: self.add_math(directive.text),
            DirectiveType.NEW_LINE: self.new_line,
            DirectiveType.NEW_PAGE: self.new_page,
            DirectiveType.FILL: self.fill,
            DirectiveType.START_CENTER: self.start_center_align,
            DirectiveType.END_ALIGN: self.end_align,
        }
        actions[directive.command]()

    # Typed shortcuts

    def add_page_title(self, title: PageTitle) -> None:
        self.add(title)

    def add_text(self, text: TextRun) -> None:
        self.add(text)

    def add_paragraph(self, paragraph: Paragraph) -> None:
        self.add(paragraph)

    def add_list(self, block: ListBlock) -> None:
        self.add(block)

    def add_image(self, image: Image) -> None:
        self.add(image)

    def add_text_title(self, title: TextTitle) -> None:
        self.add(title)

    def add_columns(self, columns: ColumnLayout) -> None:
        self.add(columns)

    def add_table(self, table: Table) -> None:
        self.add(table)

    def add_pie_chart(self, chart: PieChart) -> None:
        self.add(chart)

    def add_bar_chart(self, chart: BarChart) -> None:
        self.add(chart)

    # ------------------------------------------------------------------
    # Serializers — one per ElementKind
    # ------------------------------------------------------------------

    def _page_title_lines(self, title: PageTitle) -> list[str]:
        lines = [r"\title{" + title.title + "}"]
        if title.date is not None:
            lines.append(r"\date{" + title.date + "}")
        if title.author is not None:
            lines.append(r"\author{" + title.author + "}")
        lines.append(r"\maketitle")
        lines.append(NEW_PAGE)
        return lines

    def _text_lines(self, text: TextRun) -> list[str]:
        if text.format is None:
            return [text.text]
        return [text.format.format(text.text)]

    def _paragraph_lines(self, paragraph: Paragraph) -> list[str]:
        return [r"\paragraph{" + paragraph.heading + "}", paragraph.text]

    def _list_lines(self, block: ListBlock) -> list[str]:
        env = block.list_type.value
        lines = [r"\begin{" + env + "}"]
        if block.descriptive_items is not None:
            lines.extend(rf"\item[{term}] {desc}"
                         for term, desc in block.descriptive_items)
        else:
            lines.extend(rf"\item {item}" for item in block.items)
        lines.append(r"\end{" + env + "}")
        return lines

    def _image_lines(self, image: Image) -> list[str]:
        """Copy the image into images/ and emit a wrapped figure.

        The copy happens before anything is emitted; if it fails the
        figure is not written.
        """
        source = Path(image.path)
        target = self.image_folder / source.name
        try:
            if not (target.exists() and source.resolve() == target.resolve()):
                shutil.copyfile(source, target)
        except OSError as e:
            raise ResourceIOError(f"Could not copy image {source} to {target}: {e}") from e

        stem = source.stem
        lines = list(_WRAPFIGURE_OPEN)
        lines.append(r"\includegraphics[width=0.25\textwidth]{" + stem + "}")
        if image.caption is not None:
            lines.append(r"\caption{\label{fig:" + stem + "}" + image.caption + "}")
        lines.append(_WRAPFIGURE_CLOSE)
        return lines

    def _text_title_lines(self, title: TextTitle) -> list[str]:
        if title.size is None:
            lines = self._text_lines(TextRun(title.text))
        else:
            lines = ["{" + title.size + " " + title.text + "}"]
        lines.append(NEW_LINE)
        return lines

    def _columns_lines(self, columns: ColumnLayout) -> list[str]:
        for element in columns.elements:
            kind = getattr(element, "kind", None)
            if kind not in COLUMN_ELEMENT_KINDS:
                name = kind.value if isinstance(kind, ElementKind) else type(element).__name__
                raise UnsupportedElementError(f"'{name}' can't be placed inside columns")

        lines = [r"\begin{multicols}{" + str(len(columns.elements)) + "}"]
        for element in columns.elements:
            lines.extend(self._serialize(element))
            lines.append(r"\columnbreak")
        lines.append(r"\end{multicols}")
        return lines

    def _table_lines(self, table: Table) -> list[str]:
        lines: list[str] = []
        if table.wrap:
            lines.extend(_WRAPFIGURE_OPEN)

        if table.borders:
            lines.append(r"\begin{tabular}{ | l | c | r | }")
            lines.append(r"\hline")
        else:
            lines.append(r"\begin{tabular}{ l c r }")

        for row in table.cells:
            line = " & ".join(row) + r" \\"
            if table.borders:
                line += r" \hline"
            lines.append(line)

        lines.append(r"\end{tabular}")
        if table.wrap:
            lines.append(_WRAPFIGURE_CLOSE)
        return lines

    def _pie_chart_lines(self, chart: PieChart) -> list[str]:
        return pie_chart_lines(chart)

    def _bar_chart_lines(self, chart: BarChart) -> list[str]:
        return bar_chart_lines(chart)

    # ------------------------------------------------------------------
    # Raw and layout operations
    # ------------------------------------------------------------------

    def add_math(self, text: str) -> None:
        """Append ``text`` wrapped in inline math delimiters."""
        self.add_raw_text("$" + text + "$")

    def add_raw_text(self, text: str) -> None:
        """Append ``text`` verbatim as one line."""
        self._lines.append(text)

    def new_line(self) -> None:
        self._lines.append(NEW_LINE)

    def new_page(self) -> None:
        self._lines.append(NEW_PAGE)

    def fill(self) -> None:
        self._lines.append(FILL)

    def start_center_align(self) -> None:
        """Open a center environment; close it with ``end_align``."""
        self._lines.append(BEGIN_CENTER)

    def end_align(self) -> None:
        self._lines.append(END_CENTER)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def markup_path(self, output_name: str) -> Path:
        return self.folder / f"{output_name}{MARKUP_EXTENSION}"

    def artifact_path(self, output_name: str) -> Path:
        return self.folder / f"{output_name}{ARTIFACT_EXTENSION}"

    def render(self, output_name: str | None = None, open_viewer: bool = True) -> int:
        """Close the document, write it out and run the renderer.

        Returns the renderer's exit code. On success (0) the produced
        artifact is opened for viewing unless ``open_viewer`` is False.
        The builder must be ``recreate``-d before it is reused.

        Raises
        ------
        RendererExecutionError
            If the renderer cannot be launched.
        """
        if output_name is None:
            output_name = datetime.now().strftime(TIMESTAMP_FORMAT)

        self._lines.append(END_DOCUMENT)
        markup = self.markup_path(output_name)
        markup.write_text(self._buffer_text(), encoding="utf-8")
        logger.debug("Wrote %s", markup)

        exit_code = self.renderer.run(self.executable, [
            f"-aux-directory={self.folder}",
            f"-output-directory={self.folder}",
            str(markup),
        ])
        logger.info("Compiler exit code: %d", exit_code)

        if exit_code == 0 and open_viewer:
            self.renderer.open_for_viewing(self.artifact_path(output_name))
        return exit_code


# ---------------------------------------------------------------------------
# Convenience functions
# ---------------------------------------------------------------------------

def builder_from_spec(spec: DocumentSpec,
                      renderer: Renderer | None = None) -> DocumentBuilder:
    """Create a builder for ``spec`` and append its whole body."""
    builder = DocumentBuilder(spec.executable, spec.folder, margins=spec.margins,
                              packages=spec.packages, renderer=renderer)
    for item in spec.body:
        if isinstance(item, Directive):
            builder.apply(item)
        else:
            builder.add(item)
    return builder


def build_document(spec: DocumentSpec, renderer: Renderer | None = None,
                   output_name: str | None = None, open_viewer: bool = True) -> int:
    """One-shot convenience: build and render ``spec``, return the exit code."""
    builder = builder_from_spec(spec, renderer)
    return builder.render(output_name or spec.output_name, open_viewer=open_viewer)

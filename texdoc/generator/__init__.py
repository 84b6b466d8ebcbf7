"""Document generator package — LaTeX builder engine.

Consumes content elements and produces LaTeX markup, then hands it to an
external renderer.

Modules:
    latex_builder: Core DocumentBuilder
    charts: Pie and bar chart serialization
    renderer: Process collaborator (run renderer, open artifact)
"""

from .latex_builder import DocumentBuilder, build_document, builder_from_spec
from .charts import bar_chart_lines, pie_chart_lines
from .renderer import ProcessRenderer

__all__ = [
    "DocumentBuilder",
    "build_document",
    "builder_from_spec",
    "bar_chart_lines",
    "pie_chart_lines",
    "ProcessRenderer",
]

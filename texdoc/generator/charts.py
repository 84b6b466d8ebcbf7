"""Chart serialization — turns PieChart and BarChart elements into markup.

Both charts are drawn inside a ``tikzpicture``:
    PieChart — pgf-pie ``\\pie`` with "percentage/label" slices
    BarChart — pgfplots ``axis`` with a single ``ybar`` plot

Usage:
    from texdoc.generator.charts import pie_chart_lines

    lines = pie_chart_lines(chart)
"""

from __future__ import annotations

from texdoc.schema.formatting import pie_percentage
from texdoc.schema.models import BarChart, GraphValue, PieChart


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _slice_tokens(values: tuple[GraphValue, ...], total: int) -> list[str]:
    """Build the "percentage/label" token of every slice."""
    return [f"{pie_percentage(v.value, total)}/{v.label}" for v in values]


def _declared_colors(values: tuple[GraphValue, ...]) -> list[str]:
    """Collect the colors of the slices that declare one, in order.

    Slices without a color are skipped, so the list only lines up with
    the slices when every value has a color.
    """
    return [v.color for v in values if v.color is not None]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def pie_chart_lines(chart: PieChart) -> list[str]:
    """Serialize a pie chart.

    Raises:
        ZeroDivisionError: If the values sum to zero.
    """
    total = chart.total
    if total == 0:
        raise ZeroDivisionError("Pie chart values sum to zero")

    data = ",".join(_slice_tokens(chart.values, total))
    colors = _declared_colors(chart.values)

    if colors:
        pie = r"\pie[color={" + ",".join(colors) + "}]{" + data + "}"
    else:
        pie = r"\pie{" + data + "}"

    return [
        r"\begin{tikzpicture}",
        pie,
        r"\end{tikzpicture}",
    ]


def bar_chart_lines(chart: BarChart) -> list[str]:
    """Serialize a bar chart with one bar per value."""
    labels = ",".join(v.label for v in chart.values)

    lines = [
        r"\begin{tikzpicture}",
        r"\begin{axis}[",
        "symbolic x coords={",
        labels + "},",
        "xtick=data]",
        r"\addplot[ybar,fill=" + chart.bar_color + "] coordinates {",
    ]
    lines.extend(f"({v.label},{v.value})" for v in chart.values)
    lines += [
        "};",
        r"\end{axis}",
        r"\end{tikzpicture}",
    ]
    return lines

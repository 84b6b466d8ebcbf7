"""Data processor package — reads data files into element values."""

from .ingestion import (
    detect_encoding,
    frame_to_cells,
    read_frame,
    read_graph_values,
    read_table_cells,
)

__all__ = [
    "detect_encoding",
    "frame_to_cells",
    "read_frame",
    "read_graph_values",
    "read_table_cells",
]

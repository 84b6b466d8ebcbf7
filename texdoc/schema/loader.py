"""Document loader — YAML serialization and deserialization for DocumentSpec.

Document descriptions are plain YAML so they can be reviewed, versioned and
edited by hand. Tables and charts may reference data files instead of
inline values; those are read through ``texdoc.processor.ingestion`` and
resolved relative to the YAML file.
"""

from pathlib import Path

import yaml

from texdoc.processor import ingestion
from .models import DocumentSpec, ElementKind


def _resolve(base_dir: Path, value: str) -> Path:
    p = Path(value)
    return p if p.is_absolute() else base_dir / p


def _resolve_data_refs(item: dict, base_dir: Path) -> dict:
    """Replace data-file references of a body entry with inline values."""
    item = dict(item)
    kind = item.get("type")

    if kind == ElementKind.TABLE.value:
        source = item.pop("csv", None) or item.pop("excel", None)
        if source is not None:
            item["cells"] = ingestion.read_table_cells(
                _resolve(base_dir, source),
                header=item.pop("header", True),
                sheet=item.pop("sheet", None),
            )

    elif kind in (ElementKind.PIE_CHART.value, ElementKind.BAR_CHART.value):
        source = item.pop("csv", None) or item.pop("excel", None)
        if source is not None:
            values = ingestion.read_graph_values(
                _resolve(base_dir, source),
                label_column=item.pop("label_column", "label"),
                value_column=item.pop("value_column", "value"),
                color_column=item.pop("color_column", None),
                sheet=item.pop("sheet", None),
            )
            item["values"] = [v.to_dict() for v in values]

    elif kind == ElementKind.IMAGE.value and "path" in item:
        item["path"] = str(_resolve(base_dir, item["path"]))

    elif kind == ElementKind.COLUMNS.value:
        item["elements"] = [_resolve_data_refs(e, base_dir)
                            for e in item.get("elements", [])]

    return item


def save_document(spec: DocumentSpec, path: str | Path) -> None:
    """Serialize a DocumentSpec to a YAML file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = spec.to_dict()
    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False,
                  allow_unicode=True, width=120)


def load_document(path: str | Path) -> DocumentSpec:
    """Deserialize a DocumentSpec from a YAML file."""
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    base_dir = path.parent
    data["body"] = [_resolve_data_refs(item, base_dir)
                    for item in data.get("body") or []]
    return DocumentSpec.from_dict(data)

from __future__ import annotations

import datetime as dt
from typing import Any, Iterable, Sequence

from .builder import DictionaryRow


def _json_value(v: Any) -> Any:
    if isinstance(v, (dt.date, dt.datetime)):
        return v.isoformat()
    return v


def dictionary_to_records(rows: Iterable[DictionaryRow]) -> list[dict[str, Any]]:
    """JSON-ready representation of dictionary rows (stable key set)."""
    out: list[dict[str, Any]] = []
    for r in rows:
        out.append(
            {
                "name": r.name,
                "type": r.semantic_type.value,
                "label": r.label,
                "count": r.count,
                "missing_count": r.missing_count,
                "distinct_count": r.distinct_count,
                "level_count": r.level_count,
                "levels": [
                    {"level": f.level, "count": f.count, "value_label": f.value_label} for f in r.levels
                ],
                "more": (
                    None
                    if r.remainder is None
                    else {"label": r.remainder.label, "omitted": r.remainder.omitted, "count": r.remainder.count}
                ),
                "min": _json_value(r.minimum),
                "max": _json_value(r.maximum),
            }
        )
    return out


def _md(text: str) -> str:
    return str(text).replace("|", "\\|").replace("\n", " ")


def _fmt_number(v: Any) -> str:
    if isinstance(v, float):
        return f"{v:.6g}"
    return str(v)


def _distribution_cell(r: DictionaryRow) -> str:
    if r.level_count is not None:
        parts = []
        for f in r.levels:
            name = f"{f.level} ({f.value_label})" if f.value_label else f.level
            parts.append(f"{name}: {f.count}")
        if r.remainder is not None:
            parts.append(f"{r.remainder.label} ({r.remainder.omitted} levels, {r.remainder.count} rows)")
        head = f"{r.level_count} levels"
        return head + (f"; {'; '.join(parts)}" if parts else "")
    if r.minimum is not None or r.maximum is not None:
        return f"min {_fmt_number(_json_value(r.minimum))}, max {_fmt_number(_json_value(r.maximum))}"
    return f"{r.distinct_count} distinct"


def render_dictionary_markdown(rows: Sequence[DictionaryRow], *, title: str = "Data Dictionary") -> str:
    """Render dictionary rows as a Markdown report (one table row per column)."""
    lines: list[str] = [f"# {title}", ""]
    if not rows:
        lines.append("_No columns._")
        return "\n".join(lines) + "\n"

    lines.append(f"Columns: {len(rows)}")
    lines.append("")
    lines.append("| Column | Type | Label | N | Missing | Levels / Range |")
    lines.append("|---|---|---|---:|---:|---|")
    for r in rows:
        lines.append(
            f"| `{_md(r.name)}` | {r.semantic_type.value} | {_md(r.label)} | {r.count} | "
            f"{r.missing_count} | {_md(_distribution_cell(r))} |"
        )
    return "\n".join(lines) + "\n"

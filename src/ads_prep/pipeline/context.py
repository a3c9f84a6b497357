from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ..utils import new_id


@dataclass(frozen=True)
class PrepContext:
    """Run identifier plus the standard artifact paths of one preparation run."""

    out_dir: Path
    run_id: str

    @classmethod
    def create(cls, *, out_dir: Path, run_id: str | None = None) -> "PrepContext":
        return cls(out_dir=Path(out_dir), run_id=run_id or new_id())

    def path(self, filename: str) -> Path:
        return self.out_dir / filename

    def dictionary_json_path(self) -> Path:
        return self.path("data_dictionary.json")

    def dictionary_md_path(self) -> Path:
        return self.path("data_dictionary.md")

    def export_csv_path(self) -> Path:
        return self.path("export.csv")

    def table_view_path(self) -> Path:
        return self.path("table_view.json")

    def prep_log_path(self) -> Path:
        return self.path("prep_log.json")

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from .models import PaginationResult, SelectionExport


@dataclass
class PaginationPaths:
    document_id: str
    page_dir: Path
    page_file: Path


class PaginationStorage:
    def __init__(self, data_dir: str):
        self.data_dir = Path(data_dir)

    @staticmethod
    def document_id(source_file: str) -> str:
        # Normalize Windows backslashes
        return Path(source_file.replace("\\", "/")).stem or "document"

    def build_paths(self, source_file: str) -> PaginationPaths:
        document_id = self.document_id(source_file)
        timestamp = datetime.utcnow().strftime("%Y%m%d_%H%M%S")
        page_dir = self.data_dir / document_id / "pages"
        page_dir.mkdir(parents=True, exist_ok=True)
        page_file = page_dir / f"{document_id}_{timestamp}.json"
        return PaginationPaths(
            document_id=document_id,
            page_dir=page_dir,
            page_file=page_file,
        )

    def save(self, result: PaginationResult) -> PaginationPaths:
        paths = self.build_paths(result.source_file)
        result.save(str(paths.page_file))
        return paths

    def selection_path(self, file_name: str) -> Path:
        name = Path(file_name.replace("\\", "/")).name or "document"
        selection_dir = self.data_dir / self.document_id(file_name) / "selections"
        selection_dir.mkdir(parents=True, exist_ok=True)
        return selection_dir / f"selected-pages-{name}.json"

    def save_selection(self, export: SelectionExport, path: str | None = None) -> Path:
        """Write selection metadata; defaults to the document's selection folder."""
        target = Path(path) if path else self.selection_path(export.file_name)
        export.save(str(target))
        return target

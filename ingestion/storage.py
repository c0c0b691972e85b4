from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from .models import DecodedDocument


@dataclass
class DecodedPaths:
    document_id: str
    decoded_dir: Path
    decoded_file: Path


class DecodedStorage:
    def __init__(self, data_dir: str):
        self.data_dir = Path(data_dir)

    def build_paths(self, source_name: str) -> DecodedPaths:
        document_id = Path(source_name.replace("\\", "/")).stem or "document"
        timestamp = datetime.utcnow().strftime("%Y%m%d_%H%M%S")
        decoded_dir = self.data_dir / document_id / "decoded"
        decoded_dir.mkdir(parents=True, exist_ok=True)
        decoded_file = decoded_dir / f"{document_id}_{timestamp}.json"
        return DecodedPaths(
            document_id=document_id,
            decoded_dir=decoded_dir,
            decoded_file=decoded_file,
        )

    def save(self, document: DecodedDocument) -> DecodedPaths:
        paths = self.build_paths(document.source_name)
        document.save(str(paths.decoded_file))
        return paths

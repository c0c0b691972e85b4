import asyncio
from pathlib import Path
from typing import Optional

from .config import IngestionServiceConfig
from .loader import DocumentLoader, handle_from_path
from .models import DecodedDocument, DocumentHandle
from .storage import DecodedStorage


class IngestionService:
    def __init__(self, config: IngestionServiceConfig | None = None):
        self.config = config or IngestionServiceConfig()
        self.loader = DocumentLoader(config=self.config.decoder)
        self.storage = DecodedStorage(self.config.data_dir)

    async def decode(self, handle: DocumentHandle) -> DecodedDocument:
        return await self.loader.load(handle)

    def decode_path(
        self,
        path: str | Path,
        media_type: Optional[str] = None,
    ) -> DecodedDocument:
        return asyncio.run(self.decode(handle_from_path(path, media_type)))

    async def decode_and_save(self, handle: DocumentHandle) -> tuple[DecodedDocument, str, str]:
        document = await self.decode(handle)
        paths = self.storage.save(document)
        return document, paths.document_id, str(paths.decoded_file)

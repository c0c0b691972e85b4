from pathlib import Path
from typing import Iterable, Optional

from ingestion.loader import DocumentLoader, handle_from_path
from ingestion.models import DocumentHandle

from .config import PaginationServiceConfig
from .extractor import ContentExtractor
from .handoff import QuizGenerationClient, QuizGenerationRequest
from .models import PaginationResult, SelectionOutput
from .paginator import DocumentPaginator
from .selection import SelectionState
from .session import PreviewSession
from .storage import PaginationStorage


class PaginationService:
    def __init__(self, config: PaginationServiceConfig | None = None):
        self.config = config or PaginationServiceConfig()
        self.loader = DocumentLoader(config=self.config.ingestion.decoder)
        self.paginator = DocumentPaginator(self.config.pagination)
        self.extractor = ContentExtractor(image_placeholders=self.config.image_placeholders)
        self.storage = PaginationStorage(self.config.data_dir)

    def new_session(self) -> PreviewSession:
        return PreviewSession(
            loader=self.loader,
            paginator=self.paginator,
            extractor=self.extractor,
        )

    async def preview(self, handle: DocumentHandle) -> PaginationResult:
        decoded = await self.loader.load(handle)
        return self.paginator.paginate_document(decoded)

    async def preview_and_save(self, handle: DocumentHandle) -> tuple[PaginationResult, str]:
        result = await self.preview(handle)
        paths = self.storage.save(result)
        return result, str(paths.page_file)

    async def extract(
        self,
        path: str | Path,
        pages: Optional[Iterable[int]] = None,
        media_type: Optional[str] = None,
    ) -> tuple[PaginationResult, SelectionOutput]:
        """
        Paginate a file and build the output for the given page numbers.

        Without explicit page numbers every page is selected.

        Raises:
            EmptySelectionError: If none of the page numbers exist.
        """
        result = await self.preview(handle_from_path(path, media_type))
        selection = SelectionState.for_pages(result.pages, pages)
        return result, self.extractor.build_output(result.pages, selection)

    def submit(
        self,
        output: SelectionOutput,
        source_file: str = "",
        **options,
    ) -> dict:
        if not self.config.quiz_api_base_url:
            raise ValueError("QUIZ_API_BASE_URL is not configured")
        client = QuizGenerationClient(
            self.config.quiz_api_base_url,
            api_token=self.config.quiz_api_token,
        )
        request = QuizGenerationRequest.from_selection(output, source_file=source_file, **options)
        return client.submit(request)

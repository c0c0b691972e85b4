from typing import Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from ingestion.loader import handle_from_path

from .config import PaginationServiceConfig
from .exceptions import EmptySelectionError
from .models import PaginationStats
from .service import PaginationService


class PreviewRequest(BaseModel):
    file_path: str
    media_type: Optional[str] = None


class PageSummary(BaseModel):
    index: int
    kind: str
    chars: int
    image_count: int
    oversized: bool


class PreviewResponse(BaseModel):
    document_id: str
    output_path: str
    format: str
    total_pages: int
    fallback_used: bool
    warnings: list[str]
    stats: PaginationStats
    pages: list[PageSummary]


class ExtractRequest(BaseModel):
    file_path: str
    media_type: Optional[str] = None
    pages: Optional[list[int]] = None


class ExtractResponse(BaseModel):
    selected_page_numbers: list[int]
    selected_content: str
    total_pages: int


def create_app(config: PaginationServiceConfig | None = None) -> FastAPI:
    service = PaginationService(config=config or PaginationServiceConfig.from_env())
    app = FastAPI(
        title="Pagination Service",
        version="1.0.0",
        description="Splits decoded documents into selectable pages and extracts selected text.",
    )

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    @app.post("/preview", response_model=PreviewResponse)
    async def preview(request: PreviewRequest) -> PreviewResponse:
        try:
            handle = handle_from_path(request.file_path, request.media_type)
        except FileNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        try:
            result, output_path = await service.preview_and_save(handle)
        except Exception as exc:
            raise HTTPException(status_code=500, detail=str(exc)) from exc
        return PreviewResponse(
            document_id=service.storage.document_id(result.source_file),
            output_path=output_path,
            format=result.format.value,
            total_pages=result.total_pages,
            fallback_used=result.fallback_used,
            warnings=result.warnings,
            stats=result.stats,
            pages=[
                PageSummary(
                    index=page.index,
                    kind=page.kind.value,
                    chars=len(page.text_content),
                    image_count=page.image_count,
                    oversized=page.oversized,
                )
                for page in result.pages
            ],
        )

    @app.post("/extract", response_model=ExtractResponse)
    async def extract(request: ExtractRequest) -> ExtractResponse:
        try:
            result, output = await service.extract(
                request.file_path, request.pages, request.media_type
            )
        except FileNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except EmptySelectionError as exc:
            raise HTTPException(status_code=422, detail=exc.message) from exc
        except Exception as exc:
            raise HTTPException(status_code=500, detail=str(exc)) from exc
        return ExtractResponse(
            selected_page_numbers=output.selected_page_numbers,
            selected_content=output.selected_content,
            total_pages=result.total_pages,
        )

    return app


app = create_app()

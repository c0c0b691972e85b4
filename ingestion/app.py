from typing import Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from .config import IngestionServiceConfig
from .loader import handle_from_path
from .service import IngestionService


class DecodeRequest(BaseModel):
    file_path: str
    media_type: Optional[str] = None


class DecodeResponse(BaseModel):
    document_id: str
    output_path: str
    format: str
    units: int
    fallback_used: bool
    warnings: list[str]


def create_app(config: IngestionServiceConfig | None = None) -> FastAPI:
    service = IngestionService(config=config or IngestionServiceConfig.from_env())
    app = FastAPI(
        title="Document Ingestion Service",
        version="1.0.0",
        description="Decodes PDF, DOCX, EPUB, image and text uploads into content units.",
    )

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    @app.post("/decode", response_model=DecodeResponse)
    async def decode(request: DecodeRequest) -> DecodeResponse:
        try:
            handle = handle_from_path(request.file_path, request.media_type)
        except FileNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        try:
            document, document_id, output_path = await service.decode_and_save(handle)
        except Exception as exc:
            raise HTTPException(status_code=500, detail=str(exc)) from exc
        return DecodeResponse(
            document_id=document_id,
            output_path=output_path,
            format=document.format.value,
            units=document.total_units,
            fallback_used=document.fallback_used,
            warnings=document.warnings,
        )

    return app


app = create_app()

from dataclasses import dataclass, field
import os
from typing import Optional

from ingestion.config import IngestionServiceConfig

from .models import PaginationConfig


@dataclass
class PaginationServiceConfig:
    data_dir: str = "data/pagination"
    pagination: PaginationConfig = field(default_factory=PaginationConfig)
    ingestion: IngestionServiceConfig = field(default_factory=IngestionServiceConfig)
    image_placeholders: bool = False
    quiz_api_base_url: Optional[str] = None
    quiz_api_token: Optional[str] = None

    @classmethod
    def from_env(cls) -> "PaginationServiceConfig":
        def _int(name: str, default: int) -> int:
            value = os.environ.get(name)
            return int(value) if value else default

        defaults = PaginationConfig()
        return cls(
            data_dir=os.environ.get("PAGINATION_DATA_DIR", cls.data_dir),
            pagination=PaginationConfig(
                text_char_budget=_int("PAGINATION_TEXT_BUDGET", defaults.text_char_budget),
                docx_char_budget=_int("PAGINATION_DOCX_BUDGET", defaults.docx_char_budget),
                epub_char_budget=_int("PAGINATION_EPUB_BUDGET", defaults.epub_char_budget),
                image_weight=_int("PAGINATION_IMAGE_WEIGHT", defaults.image_weight),
            ),
            ingestion=IngestionServiceConfig.from_env(),
            image_placeholders=os.environ.get("PAGINATION_IMAGE_PLACEHOLDERS", "").strip().lower()
            in {"1", "true", "yes", "on"},
            quiz_api_base_url=os.environ.get("QUIZ_API_BASE_URL") or None,
            quiz_api_token=os.environ.get("QUIZ_API_TOKEN") or None,
        )

from dataclasses import dataclass, field
import os

from .models import DecoderConfig


@dataclass
class IngestionServiceConfig:
    data_dir: str = "data/ingestion"
    decoder: DecoderConfig = field(default_factory=DecoderConfig)

    @classmethod
    def from_env(cls) -> "IngestionServiceConfig":
        def _bool(name: str, default: bool) -> bool:
            value = os.environ.get(name)
            if not value:
                return default
            return value.strip().lower() in {"1", "true", "yes", "on"}

        def _list(name: str) -> list[str]:
            value = os.environ.get(name, "")
            return [item.strip() for item in value.split(",") if item.strip()]

        return cls(
            data_dir=os.environ.get("INGESTION_DATA_DIR", cls.data_dir),
            decoder=DecoderConfig(
                render_previews=_bool("INGESTION_RENDER_PREVIEWS", True),
                disabled_capabilities=_list("INGESTION_DISABLED_CAPABILITIES"),
            ),
        )

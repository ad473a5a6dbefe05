"""Centralised settings for the job-prep service.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (one level up from this package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)

_LOG_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"
_LOG_DATE_FMT = "%Y-%m-%d %H:%M:%S"


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Storage / static files
    # ------------------------------------------------------------------
    data_dir: Path = field(
        default_factory=lambda: Path(os.environ.get("JOBPREP_DATA_DIR", Path.cwd()))
    )
    public_dir: Path = field(
        default_factory=lambda: Path(
            os.environ.get(
                "JOBPREP_PUBLIC_DIR", Path(__file__).resolve().parent / "public"
            )
        )
    )

    @property
    def analytics_path(self) -> Path:
        """JSON file holding the page-visit counter."""
        return self.data_dir / "analytics.json"

    @property
    def links_path(self) -> Path:
        """JSON file holding the list of analysed job links."""
        return self.data_dir / "job_links.json"

    # ------------------------------------------------------------------
    # Chat / generative model
    # ------------------------------------------------------------------
    llm_provider: str = field(
        default_factory=lambda: os.environ.get("LLM_PROVIDER", "openai")
    )
    openai_api_key: str = field(
        default_factory=lambda: os.environ.get("OPENAI_API_KEY", "")
    )
    openai_chat_model: str = field(
        default_factory=lambda: os.environ.get("OPENAI_CHAT_MODEL", "gpt-4.1-mini")
    )
    ollama_chat_model: str = field(
        default_factory=lambda: os.environ.get("OLLAMA_CHAT_MODEL", "llama3.1:8b")
    )
    ollama_base_url: str = field(
        default_factory=lambda: os.environ.get("OLLAMA_BASE_URL", "http://localhost:11434")
    )
    llm_timeout: float = field(
        default_factory=lambda: float(os.environ.get("LLM_TIMEOUT", "90.0"))
    )

    # ------------------------------------------------------------------
    # Scraper
    # ------------------------------------------------------------------
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "30.0"))
    )
    proxy_base_url: str = field(
        default_factory=lambda: os.environ.get("READER_PROXY_URL", "https://r.jina.ai")
    )
    min_text_length: int = field(
        default_factory=lambda: int(os.environ.get("MIN_TEXT_LENGTH", "200"))
    )
    max_text_length: int = field(
        default_factory=lambda: int(os.environ.get("MAX_TEXT_LENGTH", "12000"))
    )

    # ------------------------------------------------------------------
    # Server / logging
    # ------------------------------------------------------------------
    host: str = field(default_factory=lambda: os.environ.get("HOST", "127.0.0.1"))
    port: int = field(default_factory=lambda: int(os.environ.get("PORT", "3000")))
    log_level: str = field(
        default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO").upper()
    )


def configure_logging(level: str | None = None) -> None:
    """Attach a single stdout handler to the root logger.

    Safe to call more than once; handlers are only installed the first time.
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, (level or settings.log_level), logging.INFO))
    if root.handlers:
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT, datefmt=_LOG_DATE_FMT))
    root.addHandler(handler)


# Module-level singleton — import this everywhere:
#   from jobprep.config import settings
settings = Settings()

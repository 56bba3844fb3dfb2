"""
Settings

Environment-driven configuration for the gateway.
"""
import os
from dataclasses import dataclass
from typing import Mapping, Optional

PACKAGE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))  # backend/ai_painter/
DEFAULT_TEMPLATE_PATH = os.path.join(PACKAGE_DIR, "static", "index.html")

DEFAULT_AI_BASE_URL = "https://api.cloudflare.com/client/v4"
DEFAULT_IMAGE_HOST_URL = "https://pic.foxhank.top"

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    """Runtime settings, built once at startup."""
    cf_account_id: str = ""
    cf_api_token: str = ""
    ai_base_url: str = DEFAULT_AI_BASE_URL
    image_host_url: str = DEFAULT_IMAGE_HOST_URL
    template_path: str = DEFAULT_TEMPLATE_PATH
    upstream_timeout: Optional[float] = None  # None = wait for upstream indefinitely
    legacy_stream_content_type: bool = False
    log_file: Optional[str] = None
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000

    @property
    def upload_url(self) -> str:
        return f"{self.image_host_url.rstrip('/')}/upload"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Read settings from environment variables.

        Raises:
            ValueError: if PAINTER_UPSTREAM_TIMEOUT or PAINTER_PORT is not numeric.
        """
        env = os.environ if environ is None else environ

        timeout_raw = env.get("PAINTER_UPSTREAM_TIMEOUT", "").strip()
        upstream_timeout = float(timeout_raw) if timeout_raw else None

        return cls(
            cf_account_id=env.get("CF_ACCOUNT_ID", ""),
            cf_api_token=env.get("CF_API_TOKEN", ""),
            ai_base_url=env.get("PAINTER_AI_BASE_URL", DEFAULT_AI_BASE_URL),
            image_host_url=env.get("PAINTER_IMAGE_HOST_URL", DEFAULT_IMAGE_HOST_URL),
            template_path=env.get("PAINTER_TEMPLATE_PATH", DEFAULT_TEMPLATE_PATH),
            upstream_timeout=upstream_timeout,
            legacy_stream_content_type=env.get("PAINTER_LEGACY_STREAM_CONTENT_TYPE", "").lower() in _TRUE_VALUES,
            log_file=env.get("PAINTER_LOG_FILE") or None,
            log_level=env.get("PAINTER_LOG_LEVEL", "INFO").upper(),
            host=env.get("PAINTER_HOST", "0.0.0.0"),
            port=int(env.get("PAINTER_PORT", "8000")),
        )

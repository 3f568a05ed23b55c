"""
Configuration module for LUXIA Studio.

Handles environment variables and default settings.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


@dataclass
class StudioConfig:
    """Configuration settings for LUXIA Studio."""

    # Gemini settings
    gemini_api_key: str = ""
    image_model: str = "gemini-2.5-flash-image"
    imagen_model: str = "imagen-4.0-generate-001"
    video_model: str = "veo-3.0-generate-001"

    # Generation settings
    image_variants: int = 2
    video_poll_seconds: float = 10.0
    video_fetch_timeout: float = 120.0
    preparing_message: str = "Preparing generation..."

    # Result settings
    download_prefix: str = "luxia-studio-result"
    image_extension: str = "png"
    video_extension: str = "mp4"

    # Catalog settings
    catalog_path: str | None = None

    # MCP Server settings
    mcp_transport: str = "stdio"  # stdio or sse
    mcp_port: int = 8080

    # Tracing settings
    enable_tracing: bool = False
    trace_name_prefix: str = "luxia-studio"

    @classmethod
    def from_env(cls) -> "StudioConfig":
        """
        Create configuration from environment variables.

        If an environment variable is not set, uses the class field default value.
        """
        _defaults = cls()

        return cls(
            gemini_api_key=os.getenv("GEMINI_API_KEY", _defaults.gemini_api_key),
            image_model=os.getenv("LUXIA_IMAGE_MODEL", _defaults.image_model),
            imagen_model=os.getenv("LUXIA_IMAGEN_MODEL", _defaults.imagen_model),
            video_model=os.getenv("LUXIA_VIDEO_MODEL", _defaults.video_model),
            image_variants=int(os.getenv("LUXIA_IMAGE_VARIANTS", str(_defaults.image_variants))),
            video_poll_seconds=float(os.getenv("LUXIA_VIDEO_POLL_SECONDS", str(_defaults.video_poll_seconds))),
            download_prefix=os.getenv("LUXIA_DOWNLOAD_PREFIX", _defaults.download_prefix),
            catalog_path=os.getenv("LUXIA_CATALOG_PATH") or _defaults.catalog_path,
            mcp_transport=os.getenv("MCP_TRANSPORT", _defaults.mcp_transport),
            mcp_port=int(os.getenv("MCP_PORT", str(_defaults.mcp_port))),
            enable_tracing=os.getenv("LUXIA_ENABLE_TRACING", str(_defaults.enable_tracing).lower()).lower() == "true",
        )


config = StudioConfig.from_env()


def get_config() -> StudioConfig:
    """Get the current configuration."""
    return config


def update_config(**kwargs) -> StudioConfig:
    """Update configuration settings."""
    global config
    for key, value in kwargs.items():
        if hasattr(config, key):
            setattr(config, key, value)
    return config

"""Runtime settings read from environment variables.

Environment variables (a .env file in the working directory is loaded first):
    MEDIMG_IMAGE_ROOT: Directory holding the downloaded datasets (default: ./downloaded_images)
    MEDIMG_PUBLIC_PREFIX: URL prefix the image root is served under (default: images)
    MEDIMG_FRONTEND_DIR: Static front-end served at / (default: ./medical-ai-frontend)
    MEDIMG_DATASETS_CONFIG: YAML dataset registry (default: packaged datasets.yaml)
    HOST, PORT: Server bind address (default: 0.0.0.0:3001)
    LOG_LEVEL: Logging level name (default: INFO)
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass
class Settings:
    image_root: Path = Path("downloaded_images")
    public_prefix: str = "images"
    frontend_dir: Optional[Path] = Path("medical-ai-frontend")
    datasets_config: Optional[Path] = None
    host: str = "0.0.0.0"
    port: int = 3001
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "Settings":
        """Build settings from the environment."""
        if dotenv:
            load_dotenv()
        env = os.environ
        datasets_config = env.get("MEDIMG_DATASETS_CONFIG")
        frontend_dir = env.get("MEDIMG_FRONTEND_DIR", "medical-ai-frontend")
        try:
            port = int(env.get("PORT", "3001"))
        except ValueError:
            raise ValueError(f"PORT must be an integer, got {env['PORT']!r}") from None
        return cls(
            image_root=Path(env.get("MEDIMG_IMAGE_ROOT", "downloaded_images")),
            public_prefix=env.get("MEDIMG_PUBLIC_PREFIX", "images").strip("/"),
            frontend_dir=Path(frontend_dir) if frontend_dir else None,
            datasets_config=Path(datasets_config) if datasets_config else None,
            host=env.get("HOST", "0.0.0.0"),
            port=port,
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
        )


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once for the server and the CLI."""
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)

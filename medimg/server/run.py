#!/usr/bin/env python3
"""Entry point for the medical image dataset server."""
import argparse
import os

import uvicorn

from ..config import Settings, configure_logging


def main():
    parser = argparse.ArgumentParser(description="Medical image dataset server")
    parser.add_argument("--host", default=None, help="Host to bind to (default: $HOST or 0.0.0.0)")
    parser.add_argument("--port", type=int, default=None, help="Port to bind to (default: $PORT or 3001)")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    parser.add_argument(
        "--image-root",
        default=None,
        help="Directory holding the downloaded datasets (default: ./downloaded_images)",
    )
    args = parser.parse_args()

    # The app factory reads its settings from the environment.
    if args.image_root:
        os.environ["MEDIMG_IMAGE_ROOT"] = args.image_root

    settings = Settings.from_env()
    configure_logging(settings.log_level)

    uvicorn.run(
        "medimg.server.server:create_app",
        factory=True,
        host=args.host or settings.host,
        port=args.port or settings.port,
        reload=args.reload,
    )


if __name__ == "__main__":
    main()

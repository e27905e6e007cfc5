"""Medical image dataset server - discover and serve locally downloaded images.

Package structure:
    medimg/
    ├── cli.py              # Command-line interface
    ├── config.py           # Environment settings and logging setup
    ├── datasets.yaml       # Supported datasets and their directory layout
    ├── core/               # Core business logic
    │   ├── models.py       # Data models (ImageRecord, DiscoveryRequest)
    │   ├── scanner.py      # Bounded image discovery
    │   ├── datasets.py     # Dataset registry and errors
    │   └── catalog.py      # Sample listings and random test images
    ├── server/             # HTTP layer
    │   ├── schemas.py      # Pydantic request/response models
    │   ├── server.py       # FastAPI app
    │   └── run.py          # uvicorn entry point
    └── api/                # External integrations
        └── client.py       # Dataset server client
"""

from .core.models import ImageRecord, DiscoveryRequest
from .core.scanner import ImageScanner
from .core.datasets import DatasetRegistry, DatasetSpec
from .core.catalog import DatasetCatalog
from .api.client import MedImgAPI, MedImgAPIError

__all__ = [
    # Core
    "ImageRecord",
    "DiscoveryRequest",
    "ImageScanner",
    "DatasetRegistry",
    "DatasetSpec",
    "DatasetCatalog",
    # API
    "MedImgAPI",
    "MedImgAPIError",
]

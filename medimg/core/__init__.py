"""Core business logic - image discovery and dataset lookups."""

from .models import DiscoveryRequest, ImageRecord, MAX_DEPTH
from .scanner import ImageScanner
from .datasets import (
    DatasetError,
    DatasetNotFoundError,
    DatasetRegistry,
    DatasetSpec,
    ImageNotFoundError,
    InvalidRequestError,
    RegistryError,
    UnknownDatasetError,
)
from .catalog import DatasetCatalog, SampleSet

__all__ = [
    "DiscoveryRequest",
    "ImageRecord",
    "MAX_DEPTH",
    "ImageScanner",
    "DatasetError",
    "DatasetNotFoundError",
    "DatasetRegistry",
    "DatasetSpec",
    "ImageNotFoundError",
    "InvalidRequestError",
    "RegistryError",
    "UnknownDatasetError",
    "DatasetCatalog",
    "SampleSet",
]

"""External integrations - client for the dataset server."""

from .client import MedImgAPI, MedImgAPIError

__all__ = ["MedImgAPI", "MedImgAPIError"]

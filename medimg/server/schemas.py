"""Pydantic schemas for API requests and responses.

Field aliases keep the camelCase JSON names the front-end sends and reads.
"""
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class ImageInfo(BaseModel):
    """One image as exposed to clients."""
    filename: str
    path: str


class DatasetInfo(_CamelModel):
    """Entry of /api/datasets."""
    kaggle_id: Optional[str] = None
    name: str
    description: str = ""
    classes: list[str] = []
    available: bool = False
    local_path: Optional[str] = Field(default=None, alias="localPath")


class DatasetListResponse(BaseModel):
    """Response for /api/datasets."""
    success: bool = True
    datasets: dict[str, DatasetInfo]


class FetchSamplesRequest(_CamelModel):
    """Request for /api/fetch-dataset-samples."""
    dataset_key: Optional[str] = Field(default=None, alias="datasetKey")
    classes: list[str] = []
    num_samples: int = Field(default=8, ge=0, alias="numSamples")


class FetchSamplesResponse(_CamelModel):
    """Response for /api/fetch-dataset-samples."""
    success: bool = True
    images: list[ImageInfo]
    organized_images: dict[str, list[ImageInfo]] = Field(alias="organizedImages")
    count: int


class FetchTestImageRequest(_CamelModel):
    """Request for /api/fetch-test-image."""
    dataset_key: Optional[str] = Field(default=None, alias="datasetKey")
    class_name: Optional[str] = Field(default=None, alias="className")


class FetchTestImageResponse(BaseModel):
    """Response for /api/fetch-test-image."""
    success: bool = True
    image: ImageInfo


class ImageListResponse(BaseModel):
    """Response for /api/images/{class_name}."""
    success: bool = True
    images: list[ImageInfo]


class HealthResponse(BaseModel):
    status: str = "ok"
    timestamp: str


class ErrorResponse(BaseModel):
    """Body of every failed request."""
    success: bool = False
    error: str

"""FastAPI server for browsing locally downloaded medical image datasets."""
import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..config import Settings
from ..core.catalog import DEFAULT_CLASS_LIMIT, DatasetCatalog
from ..core.datasets import (
    DatasetError,
    DatasetNotFoundError,
    DatasetRegistry,
    ImageNotFoundError,
    InvalidRequestError,
)
from ..core.models import ImageRecord
from ..core.scanner import ImageScanner
from .schemas import (
    DatasetInfo,
    DatasetListResponse,
    ErrorResponse,
    FetchSamplesRequest,
    FetchSamplesResponse,
    FetchTestImageRequest,
    FetchTestImageResponse,
    HealthResponse,
    ImageInfo,
    ImageListResponse,
)

logger = logging.getLogger(__name__)


def _to_info(records: list[ImageRecord]) -> list[ImageInfo]:
    return [ImageInfo(**r.to_dict()) for r in records]


def _http_error(e: DatasetError) -> HTTPException:
    if isinstance(e, InvalidRequestError):
        return HTTPException(400, detail=str(e))
    if isinstance(e, (DatasetNotFoundError, ImageNotFoundError)):
        return HTTPException(404, detail=str(e))
    return HTTPException(500, detail=str(e))


def get_catalog(request: Request) -> DatasetCatalog:
    return request.app.state.catalog


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

router = APIRouter(prefix="/api")


@router.get("/health", response_model=HealthResponse)
def health():
    return HealthResponse(timestamp=datetime.now(timezone.utc).isoformat())


@router.get("/datasets", response_model=DatasetListResponse)
def list_datasets(request: Request):
    catalog = get_catalog(request)
    datasets = {
        key: DatasetInfo(**info)
        for key, info in catalog.list_datasets().items()
    }
    return DatasetListResponse(datasets=datasets)


@router.post("/fetch-dataset-samples", response_model=FetchSamplesResponse)
def fetch_dataset_samples(body: FetchSamplesRequest, request: Request):
    catalog = get_catalog(request)
    try:
        samples = catalog.fetch_samples(body.dataset_key, body.classes, body.num_samples)
    except DatasetError as e:
        raise _http_error(e)

    return FetchSamplesResponse(
        images=_to_info(samples.images),
        organized_images={
            class_name: _to_info(images)
            for class_name, images in samples.organized.items()
        },
        count=samples.count,
    )


@router.post("/fetch-test-image", response_model=FetchTestImageResponse)
def fetch_test_image(body: FetchTestImageRequest, request: Request):
    catalog = get_catalog(request)
    try:
        record = catalog.random_test_image(body.dataset_key, body.class_name)
    except DatasetError as e:
        raise _http_error(e)
    return FetchTestImageResponse(image=ImageInfo(**record.to_dict()))


@router.get("/images/{class_name}", response_model=ImageListResponse)
def class_images(
    class_name: str,
    request: Request,
    dataset: Optional[str] = None,
    limit: int = DEFAULT_CLASS_LIMIT,
):
    catalog = get_catalog(request)
    if not dataset:
        raise HTTPException(400, detail="Dataset not specified")
    try:
        images = catalog.class_images(dataset, class_name, limit)
    except DatasetError as e:
        raise _http_error(e)
    return ImageListResponse(images=_to_info(images))


# ---------------------------------------------------------------------------
# Error shaping
# ---------------------------------------------------------------------------

async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=str(exc.detail)).model_dump(),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    messages = [
        f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=422,
        content=ErrorResponse(error="; ".join(messages)).model_dump(),
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(error=str(exc)).model_dump(),
    )


# ---------------------------------------------------------------------------
# App
# ---------------------------------------------------------------------------

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application for the given settings (default: from environment)."""
    settings = settings or Settings.from_env()

    registry = DatasetRegistry.load(settings.datasets_config)
    scanner = ImageScanner(settings.image_root, public_prefix=settings.public_prefix)

    app = FastAPI(
        title="Medical Image Dataset Server",
        version="0.1.0",
    )
    app.state.settings = settings
    app.state.catalog = DatasetCatalog(settings.image_root, registry, scanner)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(router)

    app.mount(
        f"/{settings.public_prefix}",
        StaticFiles(directory=settings.image_root, check_dir=False),
        name="images",
    )
    if settings.frontend_dir and settings.frontend_dir.is_dir():
        app.mount("/", StaticFiles(directory=settings.frontend_dir, html=True), name="frontend")
    else:
        logger.info("No front-end directory at %s; serving API only", settings.frontend_dir)

    logger.info("Serving images from %s under /%s/", settings.image_root, settings.public_prefix)
    logger.info("Datasets: %s", ", ".join(registry.keys()))
    return app

"""Dataset catalog: sample listings and test-image picks for the HTTP layer."""

import logging
import os
import random
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .datasets import (
    DatasetNotFoundError,
    DatasetRegistry,
    DatasetSpec,
    ImageNotFoundError,
)
from .models import ImageRecord
from .scanner import ImageScanner

logger = logging.getLogger(__name__)

DEFAULT_NUM_SAMPLES = 8
DEFAULT_CLASS_LIMIT = 50
# Pool size a random test image is drawn from.
TEST_IMAGE_POOL = 50


@dataclass
class SampleSet:
    """Images gathered for a set of classes."""

    images: list[ImageRecord] = field(default_factory=list)  # truncated to the request
    organized: dict[str, list[ImageRecord]] = field(default_factory=dict)  # class -> images
    count: int = 0  # total found across classes, before truncation


class DatasetCatalog:
    """Answers dataset queries by resolving directories and running discovery."""

    def __init__(
        self,
        image_root: str | Path,
        registry: DatasetRegistry,
        scanner: Optional[ImageScanner] = None,
        rng: Optional[random.Random] = None,
    ):
        """Initialize the catalog.

        Args:
            image_root: Directory holding the dataset directories
            registry: Supported datasets
            scanner: ImageScanner to use (defaults to one rooted at image_root)
            rng: Random source for test-image picks
        """
        self.image_root = Path(image_root)
        self.registry = registry
        self.scanner = scanner or ImageScanner(self.image_root)
        self.rng = rng or random.Random()

    def list_datasets(self) -> dict[str, dict]:
        """Describe every registered dataset and whether it is present locally."""
        result = {}
        for dataset in self.registry:
            root = dataset.root(self.image_root)
            available = root.is_dir()
            info = dataset.to_dict()
            info["available"] = available
            info["local_path"] = str(root.resolve()) if available else None
            result[dataset.key] = info
        return result

    def fetch_samples(
        self,
        key: Optional[str],
        classes: Optional[list[str]],
        num_samples: int = DEFAULT_NUM_SAMPLES,
    ) -> SampleSet:
        """Gather up to ``num_samples`` training images per class.

        Raises:
            InvalidRequestError: If key is empty or unknown, or a class name is not a plain name
            DatasetNotFoundError: If the dataset's training directory is missing
        """
        dataset = self.registry.get(key)
        classes = list(classes or [])
        dirnames = {name: dataset.class_dirname(name) for name in classes}
        base_dir = dataset.train_dir(self.image_root)
        self._require_directory(dataset, base_dir)

        samples = SampleSet()
        for class_name, dirname in dirnames.items():
            class_dir = base_dir / dirname
            self._check_readable(class_dir)
            samples.organized[class_name] = self.scanner.discover(class_dir, num_samples)

        # A class listed twice contributes twice.
        all_images = [img for name in classes for img in samples.organized[name]]
        samples.images = all_images[:max(num_samples, 0)]
        samples.count = len(all_images)
        logger.info(
            "Fetched %d sample(s) for %s across %d class(es)",
            samples.count, dataset.key, len(samples.organized),
        )
        return samples

    def class_images(
        self,
        key: Optional[str],
        class_name: str,
        limit: int = DEFAULT_CLASS_LIMIT,
    ) -> list[ImageRecord]:
        """List training images of one class; empty when the class is absent.

        Raises:
            InvalidRequestError: If key is empty or unknown, or class_name is not a plain name
            PermissionError: If the class directory exists but cannot be read
        """
        dataset = self.registry.get(key)
        class_dir = dataset.train_dir(self.image_root) / dataset.class_dirname(class_name)
        self._check_readable(class_dir)
        return self.scanner.discover(class_dir, limit)

    def random_test_image(
        self,
        key: Optional[str],
        class_name: Optional[str] = None,
    ) -> ImageRecord:
        """Pick one test image uniformly at random.

        Raises:
            InvalidRequestError: If key is empty or unknown, or class_name is not a plain name
            ImageNotFoundError: If no eligible image was found
        """
        dataset = self.registry.get(key)
        search_dir = dataset.test_dir(self.image_root)
        if class_name:
            search_dir = search_dir / dataset.class_dirname(class_name)
        self._check_readable(search_dir)

        images = self.scanner.discover(search_dir, TEST_IMAGE_POOL)
        if not images:
            raise ImageNotFoundError("No images found for the specified class.")
        return self.rng.choice(images)

    def _require_directory(self, dataset: DatasetSpec, directory: Path) -> None:
        if not directory.is_dir():
            raise DatasetNotFoundError(
                f"Dataset not found. Please ensure {dataset.directory} folder "
                f"exists in {self.image_root.name}."
            )
        self._check_readable(directory)

    def _check_readable(self, directory: Path) -> None:
        # Absent directories are fine; discovery treats them as empty.
        if directory.is_dir() and not os.access(directory, os.R_OK | os.X_OK):
            raise PermissionError(f"Permission denied: {directory}")

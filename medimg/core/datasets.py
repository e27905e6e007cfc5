"""Dataset registry: the supported datasets and their directory conventions."""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

import yaml

DEFAULT_REGISTRY_PATH = Path(__file__).resolve().parent.parent / "datasets.yaml"

CLASS_CASES = {"lower", "upper"}


class DatasetError(Exception):
    """Base class for dataset lookup failures."""
    pass


class InvalidRequestError(DatasetError):
    """Raised when a request does not name a usable dataset."""
    pass


class UnknownDatasetError(InvalidRequestError):
    """Raised when the dataset key is not in the registry."""
    pass


class DatasetNotFoundError(DatasetError):
    """Raised when a registered dataset has no directory on disk."""
    pass


class ImageNotFoundError(DatasetError):
    """Raised when a lookup that must yield an image finds none."""
    pass


class RegistryError(Exception):
    """Raised when the dataset registry file is malformed."""
    pass


@dataclass(frozen=True)
class DatasetSpec:
    """One supported dataset and where its images live under the image root."""

    key: str
    name: str
    directory: str
    classes: tuple[str, ...] = ()
    description: str = ""
    kaggle_id: Optional[str] = None
    train_split: Optional[str] = None
    test_split: Optional[str] = None
    class_case: str = "lower"

    def class_dirname(self, class_name: str) -> str:
        """Directory name holding ``class_name`` images for this dataset.

        Raises:
            InvalidRequestError: If the name is not a single path component
        """
        if (
            not class_name
            or class_name in (".", "..")
            or any(sep in class_name for sep in ("/", "\\", "\0"))
        ):
            raise InvalidRequestError(f"Invalid class name: {class_name!r}")
        if self.class_case == "upper":
            return class_name.upper()
        return class_name.lower()

    def root(self, image_root: Path) -> Path:
        return Path(image_root) / self.directory

    def train_dir(self, image_root: Path) -> Path:
        root = self.root(image_root)
        return root / self.train_split if self.train_split else root

    def test_dir(self, image_root: Path) -> Path:
        root = self.root(image_root)
        return root / self.test_split if self.test_split else root

    def to_dict(self) -> dict:
        return {
            "kaggle_id": self.kaggle_id,
            "name": self.name,
            "description": self.description,
            "classes": list(self.classes),
        }

    @classmethod
    def from_dict(cls, key: str, data: dict) -> "DatasetSpec":
        if not isinstance(data, dict):
            raise RegistryError(f"Dataset '{key}' must be a mapping")
        for required in ("name", "directory"):
            if not data.get(required):
                raise RegistryError(f"Dataset '{key}' is missing '{required}'")
        class_case = data.get("class_case", "lower")
        if class_case not in CLASS_CASES:
            raise RegistryError(
                f"Dataset '{key}' has invalid class_case '{class_case}' "
                f"(expected one of: {', '.join(sorted(CLASS_CASES))})"
            )
        return cls(
            key=key,
            name=data["name"],
            directory=data["directory"],
            classes=tuple(data.get("classes") or ()),
            description=data.get("description", ""),
            kaggle_id=data.get("kaggle_id"),
            train_split=data.get("train_split"),
            test_split=data.get("test_split"),
            class_case=class_case,
        )


class DatasetRegistry:
    """Lookup table of supported datasets, keyed by dataset identifier."""

    def __init__(self, datasets: list[DatasetSpec]):
        self._datasets = {d.key: d for d in datasets}

    @classmethod
    def load(cls, path: str | Path | None = None) -> "DatasetRegistry":
        """Load the registry from a YAML file.

        Args:
            path: YAML file with a top-level 'datasets' mapping
                (defaults to the packaged datasets.yaml)

        Raises:
            RegistryError: If the file is empty or malformed
            FileNotFoundError: If the file doesn't exist
        """
        path = Path(path) if path else DEFAULT_REGISTRY_PATH
        with open(path) as f:
            config = yaml.safe_load(f)

        if not config or not isinstance(config.get("datasets"), dict):
            raise RegistryError(f"Registry file must contain a 'datasets' mapping: {path}")

        return cls([
            DatasetSpec.from_dict(key, data)
            for key, data in config["datasets"].items()
        ])

    def get(self, key: Optional[str]) -> DatasetSpec:
        """Return the dataset for ``key``.

        Raises:
            InvalidRequestError: If no key was given
            UnknownDatasetError: If the key is not registered
        """
        if not key:
            raise InvalidRequestError("Dataset key required")
        try:
            return self._datasets[key]
        except KeyError:
            raise UnknownDatasetError(f"Unknown dataset: {key}") from None

    def keys(self) -> list[str]:
        return list(self._datasets)

    def __iter__(self) -> Iterator[DatasetSpec]:
        return iter(self._datasets.values())

    def __len__(self) -> int:
        return len(self._datasets)

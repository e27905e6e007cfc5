from __future__ import annotations

from pathlib import Path

import pytest

from medimg.config import Settings
from medimg.core.catalog import DatasetCatalog
from medimg.core.datasets import DatasetRegistry


def touch(path: Path, content: bytes = b"\x89PNG") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    return path


@pytest.fixture()
def image_root(tmp_path: Path) -> Path:
    """Image root with both datasets laid out the way Kaggle ships them."""
    root = tmp_path / "downloaded_images"

    busi = root / "Dataset_BUSI_with_GT"
    touch(busi / "benign" / "benign (1).png")
    touch(busi / "benign" / "benign (1)_mask.png")
    touch(busi / "benign" / "benign (2).png")
    touch(busi / "malignant" / "malignant (1).png")
    touch(busi / "malignant" / "malignant (1)_mask.png")
    touch(busi / "normal" / "normal (1).png")

    chest = root / "chest_xray"
    touch(chest / "train" / "NORMAL" / "IM-0001.jpeg")
    touch(chest / "train" / "NORMAL" / "IM-0002.jpeg")
    touch(chest / "train" / "PNEUMONIA" / "person1_bacteria_1.jpeg")
    touch(chest / "test" / "NORMAL" / "IM-0100.jpeg")
    touch(chest / "test" / "PNEUMONIA" / "person99_virus_1.jpeg")
    touch(chest / "test" / ".DS_Store", b"")
    return root


@pytest.fixture()
def registry() -> DatasetRegistry:
    return DatasetRegistry.load()


@pytest.fixture()
def catalog(image_root: Path, registry: DatasetRegistry) -> DatasetCatalog:
    return DatasetCatalog(image_root, registry)


@pytest.fixture()
def settings(image_root: Path) -> Settings:
    return Settings(image_root=image_root, frontend_dir=None)

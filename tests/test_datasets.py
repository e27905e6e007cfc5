from __future__ import annotations

from pathlib import Path

import pytest

from medimg.core.datasets import (
    DatasetRegistry,
    InvalidRequestError,
    RegistryError,
    UnknownDatasetError,
)


def test_default_registry_has_both_datasets(registry):
    assert set(registry.keys()) == {"breast_ultrasound", "chest_xray"}
    assert len(registry) == 2


def test_class_directory_case_per_dataset(registry):
    assert registry.get("breast_ultrasound").class_dirname("Benign") == "benign"
    assert registry.get("chest_xray").class_dirname("Pneumonia") == "PNEUMONIA"


def test_split_directories(registry):
    root = Path("/data")
    chest = registry.get("chest_xray")
    busi = registry.get("breast_ultrasound")

    assert chest.root(root) == Path("/data/chest_xray")
    assert chest.train_dir(root) == Path("/data/chest_xray/train")
    assert chest.test_dir(root) == Path("/data/chest_xray/test")
    assert busi.train_dir(root) == busi.test_dir(root) == Path("/data/Dataset_BUSI_with_GT")


def test_missing_key_is_invalid_request(registry):
    with pytest.raises(InvalidRequestError, match="required"):
        registry.get(None)
    with pytest.raises(InvalidRequestError):
        registry.get("")


def test_unknown_key(registry):
    with pytest.raises(UnknownDatasetError, match="brain_mri"):
        registry.get("brain_mri")


def test_load_custom_registry(tmp_path):
    path = tmp_path / "datasets.yaml"
    path.write_text(
        "datasets:\n"
        "  skin:\n"
        "    name: Skin Lesions\n"
        "    directory: ham10000\n"
        "    classes: [Nevus, Melanoma]\n"
    )

    registry = DatasetRegistry.load(path)
    skin = registry.get("skin")

    assert skin.classes == ("Nevus", "Melanoma")
    assert skin.class_case == "lower"
    assert skin.to_dict()["name"] == "Skin Lesions"


@pytest.mark.parametrize(
    "content",
    [
        "",
        "datasets: []\n",
        "datasets:\n  skin:\n    name: Skin\n",
        "datasets:\n  skin:\n    name: Skin\n    directory: skin\n    class_case: title\n",
    ],
)
def test_malformed_registry(tmp_path, content):
    path = tmp_path / "datasets.yaml"
    path.write_text(content)

    with pytest.raises(RegistryError):
        DatasetRegistry.load(path)


def test_dataset_spec_is_hashable(registry):
    chest = registry.get("chest_xray")

    assert {chest: "x"}[chest] == "x"
    assert chest.to_dict()["classes"] == ["Normal", "Pneumonia"]


@pytest.mark.parametrize("class_name", ["", ".", "..", "../../outside", "a/b", "a\\b", "nul\0"])
def test_class_dirname_rejects_path_components(registry, class_name):
    with pytest.raises(InvalidRequestError, match="Invalid class name"):
        registry.get("breast_ultrasound").class_dirname(class_name)

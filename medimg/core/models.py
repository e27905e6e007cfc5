"""Data models for discovered image files."""

from dataclasses import dataclass
from pathlib import Path

# Directory levels below the scan root that discovery will still list.
MAX_DEPTH = 5


@dataclass(frozen=True)
class ImageRecord:
    """An eligible image file found during one discovery call."""

    filename: str
    relative_path: str  # web path, e.g. "/images/chest_xray/test/NORMAL/x.jpeg"
    absolute_path: str

    def to_dict(self) -> dict:
        # absolute_path stays internal
        return {
            "filename": self.filename,
            "path": self.relative_path,
        }


@dataclass(frozen=True)
class DiscoveryRequest:
    """Parameters of a single discovery walk."""

    root_directory: Path
    sample_limit: int
    max_depth: int = MAX_DEPTH

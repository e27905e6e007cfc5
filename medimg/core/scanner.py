"""Image discovery: bounded walk of a dataset directory for eligible images."""

import logging
import os
from pathlib import Path, PurePath

from .models import DiscoveryRequest, ImageRecord, MAX_DEPTH

logger = logging.getLogger(__name__)


class ImageScanner:
    """Finds image files below a directory and maps them to public web paths.

    Web paths are built relative to ``image_root`` (the directory served
    under ``/<public_prefix>/``), so the scanned directory should live
    inside it.
    """

    IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".bmp"}
    # Ground-truth segmentation masks sit next to the source images in BUSI.
    EXCLUDE_MARKER = "_mask"

    def __init__(self, image_root: str | Path, public_prefix: str = "images"):
        self.image_root = Path(image_root).resolve()
        self.public_prefix = public_prefix.strip("/")

    @classmethod
    def is_image(cls, filepath: str | Path) -> bool:
        """Check if a file name qualifies as an image to discover."""
        name = PurePath(filepath).name
        return (
            PurePath(name).suffix.lower() in cls.IMAGE_EXTENSIONS
            and cls.EXCLUDE_MARKER not in name
        )

    def web_path(self, filepath: str | Path) -> str:
        """Public URL path for a file below the image root."""
        relative = PurePath(os.path.relpath(filepath, self.image_root)).as_posix()
        return f"/{self.public_prefix}/{relative}"

    def discover(self, root_directory: str | Path, sample_limit: int) -> list[ImageRecord]:
        """Collect up to ``sample_limit`` eligible images below ``root_directory``.

        The walk is depth-first and follows the order in which the file
        system lists entries, so which images are returned when more than
        ``sample_limit`` exist varies across platforms. A missing root, or
        any directory that cannot be listed, contributes no images and is
        never an error.

        Args:
            root_directory: Directory to walk
            sample_limit: Maximum number of records to return

        Returns:
            List of ImageRecord, at most ``sample_limit`` long
        """
        request = DiscoveryRequest(
            root_directory=Path(root_directory).resolve(),
            sample_limit=sample_limit,
            max_depth=MAX_DEPTH,
        )
        return self.walk(request)

    def walk(self, request: DiscoveryRequest) -> list[ImageRecord]:
        """Run the discovery walk described by ``request``."""
        images: list[ImageRecord] = []
        pending: list[tuple[Path, int]] = [(request.root_directory, 0)]

        while pending and len(images) < request.sample_limit:
            directory, depth = pending.pop()
            if depth > request.max_depth:
                continue

            subdirs: list[Path] = []
            try:
                with os.scandir(directory) as entries:
                    for entry in entries:
                        if len(images) >= request.sample_limit:
                            break
                        if entry.is_dir(follow_symlinks=False):
                            subdirs.append(Path(entry.path))
                        elif entry.is_file(follow_symlinks=False) and self.is_image(entry.name):
                            images.append(ImageRecord(
                                filename=entry.name,
                                relative_path=self.web_path(entry.path),
                                absolute_path=entry.path,
                            ))
            except FileNotFoundError:
                logger.debug("Skipping missing directory %s", directory)
                continue
            except OSError as e:
                logger.warning("Skipping unreadable directory %s: %s", directory, e)
                continue

            # Reversed so the first listed subdirectory is walked next.
            pending.extend((subdir, depth + 1) for subdir in reversed(subdirs))

        return images

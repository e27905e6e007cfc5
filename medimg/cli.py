"""Command-line interface for the medical image dataset server.

`scan` walks a local directory directly; the other commands query a
running server.

Environment variables:
    MEDIMG_SERVER_URL: Base URL of the server (default: http://localhost:3001)
    MEDIMG_IMAGE_ROOT: Image root used to build web paths for `scan`
"""

import argparse
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from .api.client import MedImgAPI, MedImgAPIError
from .config import configure_logging
from .core.scanner import ImageScanner


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

def scan(args):
    """Discover images below a local directory."""
    path = Path(args.path)
    image_root = Path(args.image_root or os.environ.get("MEDIMG_IMAGE_ROOT") or path)
    scanner = ImageScanner(image_root)

    images = scanner.discover(path, args.limit)
    if not images:
        print(f"No images found under {path}")
        return

    for record in images:
        print(f"{record.filename:<40} {record.relative_path}")
    print(f"\nFound {len(images)} image(s) (limit {args.limit})")


def datasets(args):
    """List datasets and whether they are available on the server."""
    api = MedImgAPI(args.url)
    for key, info in api.list_datasets().items():
        status = "available" if info.get("available") else "missing"
        print(f"{key:<20} {status:<10} {info.get('name', '')}")
        print(f"  Classes: {', '.join(info.get('classes', []))}")
        if info.get("localPath"):
            print(f"  Path:    {info['localPath']}")


def samples(args):
    """Fetch sample images for the given classes."""
    api = MedImgAPI(args.url)
    result = api.fetch_samples(args.dataset, args.classes, args.num_samples)

    for class_name, images in result["organizedImages"].items():
        print(f"{class_name} ({len(images)}):")
        for img in images:
            print(f"  {img['path']}")
    print(f"\nReturned {len(result['images'])} of {result['count']} image(s)")


def class_images(args):
    """List images of one class."""
    api = MedImgAPI(args.url)
    images = api.class_images(args.dataset, args.class_name, args.limit)
    if not images:
        print(f"No images for class {args.class_name}")
        return
    for img in images:
        print(img["path"])


def test_image(args):
    """Pick a random test image, optionally downloading it."""
    api = MedImgAPI(args.url)
    image = api.fetch_test_image(args.dataset, args.class_name)
    print(f"{image['filename']}: {image['path']}")

    if args.output:
        written = api.download_image(image["path"], args.output)
        print(f"Saved to {written}")


def main():
    load_dotenv()

    parser = argparse.ArgumentParser(
        description="Medical image datasets - discover and browse local images"
    )
    parser.add_argument(
        "--url", "-u",
        default=os.environ.get("MEDIMG_SERVER_URL", "http://localhost:3001"),
        help="Server base URL (default: $MEDIMG_SERVER_URL or http://localhost:3001)"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    # Scan command
    scan_parser = subparsers.add_parser("scan", help="Discover images in a local directory")
    scan_parser.add_argument("path", help="Directory to scan")
    scan_parser.add_argument("--limit", "-n", type=int, default=50, help="Maximum images (default: 50)")
    scan_parser.add_argument(
        "--image-root",
        default=None,
        help="Root the web paths are relative to (default: $MEDIMG_IMAGE_ROOT or PATH)"
    )
    scan_parser.set_defaults(func=scan)

    # Datasets command
    datasets_parser = subparsers.add_parser("datasets", help="List datasets on the server")
    datasets_parser.set_defaults(func=datasets)

    # Samples command
    samples_parser = subparsers.add_parser("samples", help="Fetch sample images per class")
    samples_parser.add_argument("dataset", help="Dataset key (e.g. chest_xray)")
    samples_parser.add_argument("classes", nargs="+", help="Class names")
    samples_parser.add_argument("--num-samples", "-n", type=int, default=8, help="Samples (default: 8)")
    samples_parser.set_defaults(func=samples)

    # Class images command
    images_parser = subparsers.add_parser("images", help="List images of one class")
    images_parser.add_argument("dataset", help="Dataset key")
    images_parser.add_argument("class_name", help="Class name")
    images_parser.add_argument("--limit", "-n", type=int, default=50, help="Maximum images (default: 50)")
    images_parser.set_defaults(func=class_images)

    # Test image command
    test_parser = subparsers.add_parser("test-image", help="Pick a random test image")
    test_parser.add_argument("dataset", help="Dataset key")
    test_parser.add_argument("--class", dest="class_name", default=None, help="Restrict to one class")
    test_parser.add_argument("--output", "-o", default=None, help="Download the image to this file or directory")
    test_parser.set_defaults(func=test_image)

    args = parser.parse_args()
    configure_logging("DEBUG" if args.verbose else "WARNING")

    try:
        args.func(args)
    except MedImgAPIError as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()

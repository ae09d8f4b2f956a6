#!/usr/bin/env python3
"""
Example usage of the EXIF Date Resolver module.
"""

import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

from exif_date_resolver import DateResolver

IMAGE_EXTENSIONS = {'.jpg', '.jpeg', '.tiff', '.tif', '.png', '.heic', '.heif', '.webp'}


def main():
    """Print the resolved date of every image in a folder, oldest first."""

    # Example folder path - replace with your own
    folder_path = Path(sys.argv[1] if len(sys.argv) > 1 else "./sample_photos")

    if not folder_path.exists():
        print(f"Example folder {folder_path} does not exist.")
        print("Please create a folder with some image files to test.")
        return

    if "--verbose" in sys.argv:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    print("EXIF Date Resolver - Example Usage")
    print("=" * 50)

    resolver = DateResolver()
    images = [p for p in folder_path.rglob('*') if p.suffix.lower() in IMAGE_EXTENSIONS]

    resolved = [(resolver.resolve_with_source(path), path) for path in images]
    resolved.sort(key=lambda item: item[0].timestamp)

    undetermined = 0
    for resolution, path in resolved:
        if not resolution.determined:
            undetermined += 1
            print(f"{'unknown':<20} {'-':<24} {path.name}")
            continue
        date = datetime.fromtimestamp(resolution.timestamp, tz=timezone.utc)
        print(f"{date:%Y-%m-%d %H:%M:%S}  {resolution.source.label:<24} {path.name}")

    print("-" * 50)
    print(f"Total images: {len(resolved)}")
    print(f"Without a usable date: {undetermined}")


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""
Seed script to populate the system via API endpoints.

Every supported image file in the given directory is uploaded once.

Run:
    poetry run python seed/seed_images.py \
      --api-id <API-ID> \
      --api-key <API-KEY> \
      --images-dir ./seed/images
"""

import argparse
import base64
from pathlib import Path
import sys
from typing import Any, cast

from aws_lambda_powertools import Logger
import requests

from imggen_storage.core.utils.constants import MIME_TYPE_EXTENSION_MAP

logger = Logger(service="seed")


IMAGES_API_URL = "http://localhost:4566/restapis/{0}/snd/_user_request_/v1/images"

EXTENSION_MIME_MAP: dict[str, str] = {
    extension: mime_type
    for mime_type, extensions in MIME_TYPE_EXTENSION_MAP.items()
    if mime_type != "image/jpg"
    for extension in extensions
}


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed images via Image Storage API")

    parser.add_argument(
        "--api-id",
        required=True,
        help="Base API ID (e.g. LocalStack API Gateway ID)",
    )
    parser.add_argument(
        "--api-key",
        default=None,
        help="API key for x-api-key header (optional for local)",
    )
    parser.add_argument(
        "--images-dir",
        type=Path,
        default=Path(__file__).parent / "images",
        help="Directory holding the images to upload",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=4,
        help="Number of images to seed",
    )

    return parser.parse_args(argv)


def find_images(images_dir: Path, limit: int) -> list[Path]:
    """Supported image files in the directory, sorted by name."""
    paths = [
        path
        for path in sorted(images_dir.iterdir())
        if path.is_file() and path.suffix.lower().lstrip(".") in EXTENSION_MIME_MAP
    ]
    return paths[:limit]


def build_payload(image_path: Path) -> dict[str, Any]:
    return {
        "file": base64.b64encode(image_path.read_bytes()).decode("utf-8"),
        "file_name": image_path.name,
        "mime_type": EXTENSION_MIME_MAP[image_path.suffix.lower().lstrip(".")],
        "description": f"Seeded from {image_path.name}",
    }


def seed_images(argv: list[str] | None = None) -> list[str]:
    """Upload the images and return the ids of those stored."""
    seeded: list[str] = []

    try:
        args = parse_args(argv)

        headers: dict[str, str] = {
            "Content-Type": "application/json",
        }
        if args.api_key:
            headers["x-api-key"] = args.api_key

        upload_url = IMAGES_API_URL.format(args.api_id)

        logger.info(
            "Starting seeding process",
            extra={"api_base_url": upload_url, "images_dir": str(args.images_dir)},
        )

        for image_path in find_images(args.images_dir, args.limit):
            response = requests.post(
                upload_url,
                headers=headers,
                json=build_payload(image_path),
                timeout=30,
            )

            response_json = cast(dict[str, Any], response.json())

            if response.status_code == 201:
                seeded.append(response_json["image_id"])
                logger.info(
                    "Seeded image",
                    extra={
                        "image": image_path.name,
                        "image_id": response_json.get("image_id"),
                    },
                )
            else:
                logger.error(
                    "Failed to seed image",
                    extra={
                        "image": image_path.name,
                        "status": response.status_code,
                        "response": response_json,
                    },
                )

        logger.info("Seeding completed", extra={"seeded": len(seeded)})

    except Exception as exc:
        logger.exception("Seeding failed", exc_info=exc)
        sys.exit(1)

    return seeded


if __name__ == "__main__":
    seed_images()

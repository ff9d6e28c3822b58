#!/usr/bin/env python3
"""
Cleanup script to remove stored images via API endpoints.

Run:
    poetry run python seed/cleanup_images.py \
      --api-id <API-ID> \
      --api-key <API-KEY> \
      [--mime-type image/png]
"""

import argparse
import sys
from typing import Any, cast

from aws_lambda_powertools import Logger
import requests

logger = Logger(service="cleanup")

BASE_API_URL = "http://localhost:4566/restapis/{0}/snd/_user_request_/v1/images"
PAGE_SIZE = 100


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Cleanup images via Image Storage API")

    parser.add_argument(
        "--api-id",
        required=True,
        help="API Gateway ID (LocalStack)",
    )
    parser.add_argument(
        "--api-key",
        default=None,
        help="API key for x-api-key header (optional for local)",
    )
    parser.add_argument(
        "--mime-type",
        default=None,
        help="Only delete images of this MIME type",
    )

    return parser.parse_args(argv)


def collect_image_ids(
    base_url: str,
    headers: dict[str, str],
    mime_type: str | None,
) -> list[str]:
    """Walk every list page and gather image ids before deleting anything."""
    image_ids: list[str] = []
    page = 1

    while True:
        params: dict[str, Any] = {"page": page, "page_size": PAGE_SIZE}
        if mime_type:
            params["mime_type"] = mime_type

        response = requests.get(base_url, headers=headers, params=params, timeout=30)
        if not response.ok:
            logger.error(
                "Failed to list images",
                extra={"status": response.status_code, "response": response.text},
            )
            sys.exit(1)

        response_json = cast(dict[str, Any], response.json())
        images = cast(list[dict[str, Any]], response_json.get("images", []))
        image_ids.extend(image["image_id"] for image in images)

        if not response_json.get("pagination", {}).get("has_more"):
            return image_ids
        page += 1


def cleanup_images(argv: list[str] | None = None) -> int:
    """Delete matching images and return how many were removed."""
    deleted = 0

    try:
        args = parse_args(argv)

        headers: dict[str, str] = {}
        if args.api_key:
            headers["x-api-key"] = args.api_key

        base_url = BASE_API_URL.format(args.api_id)

        logger.info(
            "Starting cleanup process",
            extra={"api_base_url": base_url, "mime_type": args.mime_type},
        )

        image_ids = collect_image_ids(base_url, headers, args.mime_type)
        if not image_ids:
            logger.info("No images found for cleanup")
            return 0

        for image_id in image_ids:
            delete_resp = requests.delete(
                f"{base_url}/{image_id}",
                headers=headers,
                timeout=30,
            )

            if delete_resp.ok:
                deleted += 1
                logger.info("Deleted image", extra={"image_id": image_id})
            else:
                logger.error(
                    "Failed to delete image",
                    extra={
                        "image_id": image_id,
                        "status": delete_resp.status_code,
                        "response": delete_resp.text,
                    },
                )

        logger.info("Cleanup completed successfully", extra={"deleted": deleted})

    except Exception as exc:
        logger.exception("Cleanup failed", exc_info=exc)
        sys.exit(1)

    return deleted


if __name__ == "__main__":
    cleanup_images()

#!/usr/bin/env python3
"""
Command line upload client.

Usage:
    photo-relay-upload photo.jpg
    photo-relay-upload clip.mp4 --api-url https://relay.example.com

    # Or with the relay URL from the environment:
    PHOTO_RELAY_API_URL=https://relay.example.com photo-relay-upload photo.jpg
"""
import argparse
import asyncio
import sys
from typing import Optional

from photo_relay.client.uploader import UploadClient, select_file


def alert(message: str) -> None:
    print(message, file=sys.stderr)


async def upload_once(path: str, api_url: Optional[str] = None, token: Optional[str] = None) -> int:
    """Upload one file and report the outcome. Returns the process exit code."""
    try:
        selected = select_file(path)
    except OSError as e:
        print(f"ERROR: cannot read {path}: {e}", file=sys.stderr)
        return 1

    client = UploadClient(base_url=api_url, token=token, on_alert=alert)
    print(f"Uploading {selected.name} ({selected.size_bytes} bytes) to {client.base_url}...")
    result = await client.submit(selected)

    if not result.success:
        return 1

    print("Thank you for sharing your memory!")
    print(f"File id: {result.file_id}")
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Share a photo or video with the event folder.")
    parser.add_argument("file", help="Image or video to upload")
    parser.add_argument("--api-url", default=None, help="Relay base URL (default: $PHOTO_RELAY_API_URL or http://localhost:3001)")
    parser.add_argument("--token", default=None, help="Optional bearer token")
    args = parser.parse_args(argv)

    return asyncio.run(upload_once(args.file, api_url=args.api_url, token=args.token))


if __name__ == "__main__":
    sys.exit(main())

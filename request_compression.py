"""
Request Compression

Helper script to exercise a running webhook: asks it to compress a PNG
reachable at a public URL, then downloads the result.

Usage:
    python request_compression.py <png-url> [filename]

The script will:
    1. POST the URL to /compress on the webhook.
    2. Download the compressed file from the returned link.
    3. Save it under the suggested filename in the current directory.

Set WEBHOOK_URL (default http://localhost:3000) and, if the webhook is
protected, TOKEN in the environment or a .env file.
"""

import os
import sys
from pathlib import Path

import requests
from dotenv import load_dotenv

load_dotenv()

WEBHOOK_URL = os.getenv("WEBHOOK_URL", "http://localhost:3000").rstrip("/")
TOKEN = os.getenv("TOKEN")


def request_compression(source_url: str, filename: str | None) -> dict:
    """Ask the webhook to compress ``source_url``; returns its JSON reply."""
    headers = {"Content-Type": "application/json"}
    if TOKEN:
        headers["Authorization"] = f"Bearer {TOKEN}"
    body = {"url": source_url}
    if filename:
        body["filename"] = filename

    resp = requests.post(f"{WEBHOOK_URL}/compress", headers=headers, json=body)
    if resp.status_code != 200:
        try:
            error = resp.json().get("error", resp.text)
        except ValueError:
            error = resp.text
        print(f"Error: webhook returned {resp.status_code}: {error}")
        sys.exit(1)
    return resp.json()


def download(url: str, destination: Path) -> int:
    """Save the compressed file, returning its size in bytes."""
    resp = requests.get(url)
    resp.raise_for_status()
    destination.write_bytes(resp.content)
    return len(resp.content)


def main():
    if len(sys.argv) < 2:
        print("Usage: python request_compression.py <png-url> [filename]")
        sys.exit(1)

    source_url = sys.argv[1]
    filename = sys.argv[2] if len(sys.argv) > 2 else None

    print(f"Compressing {source_url}...")
    result = request_compression(source_url, filename)
    print(f"  Temporary link: {result['url']}")

    destination = Path(result["suggestedFilename"])
    size = download(result["url"], destination)

    print("\n" + "=" * 50)
    print(f"Saved: {destination} ({size} bytes)")
    print("=" * 50)
    print("\nThe link stays valid for 10 minutes.")


if __name__ == "__main__":
    main()

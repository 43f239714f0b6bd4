#!/usr/bin/env python3
"""
Test script to send a signed webhook delivery to the handler.

This script signs a payload with the shared secret the same way GitHub
does (X-Hub-Signature-256: sha256=<hex>) and posts it to the handler.

Usage:
    python scripts/send_webhook.py                          # Send a ping payload
    python scripts/send_webhook.py --payload '{"test": 1}'  # Custom inline payload
    python scripts/send_webhook.py --file push.json         # Payload from file
    python scripts/send_webhook.py --tamper                 # Send a wrong signature
"""
from __future__ import annotations

import argparse
import os
import sys

import httpx

# Add parent dir to path to import from webhook_handler
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from webhook_handler.services.security import SIGNATURE_HEADER, sign_payload


DEFAULT_PAYLOAD = '{"zen": "Keep it logically awesome.", "hook_id": 1}'


def send_webhook(body: bytes, url: str, secret: bytes, tamper: bool = False):
    """Send a signed payload to the webhook handler."""
    signature = sign_payload(secret, body)
    if tamper:
        # Flip the last hex digit
        signature = signature[:-1] + ("0" if signature[-1] != "0" else "1")

    print(f"\n📤 Sending {len(body)} bytes to {url}")
    print(f"   {SIGNATURE_HEADER}: {signature}")

    try:
        response = httpx.post(
            url,
            content=body,
            headers={
                "Content-Type": "application/json",
                SIGNATURE_HEADER: signature
            },
            timeout=10.0
        )

        print(f"\n📥 Response ({response.status_code}):")
        try:
            data = response.json()
            print(f"   {data.get('status', data.get('detail', response.text))}")
        except ValueError:
            print(f"   {response.text}")

    except httpx.RequestError as e:
        print(f"\n❌ Error: {e}")
        print("   Is the handler running? (webhook-handler)")


def main():
    parser = argparse.ArgumentParser(description="Send a signed webhook delivery")
    parser.add_argument("--payload", default=DEFAULT_PAYLOAD, help="Inline payload")
    parser.add_argument("--file", help="Read the payload from a file instead")
    parser.add_argument("--url", default="http://localhost:8080/", help="Handler URL")
    parser.add_argument("--secret", help="Shared secret (or set WEBHOOK_SECRET env)")
    parser.add_argument("--tamper", action="store_true", help="Send a signature that does not match")

    args = parser.parse_args()

    # Get secret
    secret = args.secret or os.environ.get("WEBHOOK_SECRET")
    if not secret:
        print("❌ Error: WEBHOOK_SECRET not set")
        print("   Set via --secret or WEBHOOK_SECRET environment variable")
        sys.exit(1)

    if args.file:
        with open(args.file, "rb") as f:
            body = f.read()
    else:
        body = args.payload.encode("utf-8")

    send_webhook(body, args.url, secret.encode("utf-8"), tamper=args.tamper)


if __name__ == "__main__":
    main()

"""
Security service - X-Hub-Signature-256 extraction and HMAC signature validation.
"""
from __future__ import annotations

import binascii
import hashlib
import hmac
from typing import Mapping, Optional, Union

SIGNATURE_HEADER = "X-Hub-Signature-256"
SIGNATURE_PREFIX = "sha256="


class SignatureError(Exception):
    """
    Base class for signature verification failures.

    The subclasses exist for server-side diagnostics only. Callers must map
    every one of them to the same outward response.
    """


class MalformedSignatureEncoding(SignatureError):
    """Header value is not ASCII text or has no sha256= prefix."""


class InvalidHexEncoding(SignatureError):
    """The digest after the prefix is not valid hexadecimal."""


class DigestMismatch(SignatureError):
    """The digest decoded but does not match the payload."""


def extract_signature(headers: Mapping[str, str]) -> Optional[str]:
    """
    Get the claimed signature from the request headers.

    Starlette and httpx headers are already case-insensitive; plain dicts
    are searched without regard to case.
    """
    value = headers.get(SIGNATURE_HEADER)
    if value is not None:
        return value
    wanted = SIGNATURE_HEADER.lower()
    for name, value in headers.items():
        if name.lower() == wanted:
            return value
    return None


def sign_payload(secret: bytes, payload: bytes) -> str:
    """Create the X-Hub-Signature-256 header value for a payload."""
    digest = hmac.new(secret, payload, hashlib.sha256).hexdigest()
    return f"{SIGNATURE_PREFIX}{digest}"


def _decode_claimed(signature: Union[str, bytes]) -> bytes:
    """Parse ``sha256=<hex>`` into raw digest bytes."""
    if isinstance(signature, bytes):
        try:
            signature = signature.decode("ascii")
        except UnicodeDecodeError:
            raise MalformedSignatureEncoding("Signature contains non-ASCII bytes")

    if not signature.isascii():
        raise MalformedSignatureEncoding("Signature contains non-ASCII characters")

    if len(signature) < len(SIGNATURE_PREFIX):
        raise MalformedSignatureEncoding("Signature is shorter than the sha256= prefix")

    prefix, hex_digest = signature[:len(SIGNATURE_PREFIX)], signature[len(SIGNATURE_PREFIX):]
    if prefix != SIGNATURE_PREFIX:
        raise MalformedSignatureEncoding(f"Unsupported signature algorithm tag: {prefix!r}")

    # unhexlify, unlike bytes.fromhex, refuses embedded whitespace
    try:
        return binascii.unhexlify(hex_digest)
    except (binascii.Error, ValueError) as e:
        raise InvalidHexEncoding(f"Signature is not valid hexadecimal: {e}") from e


def verify_signature(secret: bytes, payload: bytes, signature: Union[str, bytes]) -> None:
    """
    Verify an X-Hub-Signature-256 value against the raw request body.

    The payload must be the exact bytes received. The comparison uses
    hmac.compare_digest so its running time does not depend on where the
    digests differ.

    Raises:
        MalformedSignatureEncoding: Value is not ASCII, too short, or has another tag
        InvalidHexEncoding: Digest part is not valid hex
        DigestMismatch: Digest does not match HMAC-SHA256(secret, payload)
    """
    claimed = _decode_claimed(signature)
    expected = hmac.new(secret, payload, hashlib.sha256).digest()
    if not hmac.compare_digest(expected, claimed):
        raise DigestMismatch("Signature does not match payload")

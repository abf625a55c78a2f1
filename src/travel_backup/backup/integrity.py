"""HMAC signing of backup files.

A signed backup carries an ``integrity`` object next to its data:

    {"version": "1.2.0", ..., "integrity": {"algorithm": "hmac-sha256", "signature": "..."}}

The signature covers the compact, key-sorted JSON of everything except the
``integrity`` key, so it survives re-indenting the file.
"""

import hashlib
import hmac
import json
import logging
from typing import Any

from travel_backup.backup.errors import BackupIntegrityError

logger = logging.getLogger(__name__)

ALGORITHM = "hmac-sha256"


def _payload(data: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in data.items() if k != "integrity"}


def compute_signature(data: dict[str, Any], secret: str) -> str:
    """Return the hex HMAC-SHA256 of ``data`` without its ``integrity`` key."""
    canonical = json.dumps(
        _payload(data), separators=(",", ":"), ensure_ascii=False, sort_keys=True
    )
    return hmac.new(secret.encode(), canonical.encode(), hashlib.sha256).hexdigest()


def sign_backup(data: dict[str, Any], secret: str) -> dict[str, Any]:
    """Return a copy of ``data`` with an ``integrity`` signature attached."""
    payload = _payload(data)
    payload["integrity"] = {
        "algorithm": ALGORITHM,
        "signature": compute_signature(payload, secret),
    }
    return payload


def verify_backup(data: dict[str, Any], secret: str) -> tuple[dict[str, Any], bool]:
    """Check the signature of a backup read from disk.

    Returns:
        Tuple of (data without ``integrity``, verified).  An unsigned backup
        is returned with ``verified=False``.

    Raises:
        BackupIntegrityError: If the algorithm is unknown or the signature
            does not match.
    """
    integrity = data.get("integrity")
    payload = _payload(data)

    if integrity is None:
        logger.warning("Backup is not signed; skipping integrity check")
        return payload, False

    algorithm = integrity.get("algorithm") if isinstance(integrity, dict) else None
    if algorithm != ALGORITHM:
        raise BackupIntegrityError(f"Unsupported integrity algorithm: {algorithm}")

    expected = compute_signature(payload, secret)
    if not hmac.compare_digest(expected, str(integrity.get("signature", ""))):
        raise BackupIntegrityError("Backup integrity check failed: signature mismatch")

    return payload, True

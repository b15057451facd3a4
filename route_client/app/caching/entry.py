"""
Cache entry value type and its serialized record format.
"""

import base64
import binascii
import json
from dataclasses import dataclass
from typing import Optional

from shared.errors import CacheDecodeError, CacheEncodeError


@dataclass(frozen=True)
class CacheEntry:
    """Cached response payload plus the validator (ETag) it was served with."""

    payload: bytes
    validator: Optional[str] = None

    def to_bytes(self) -> bytes:
        """Serialize to a JSON record with a base64 payload."""
        try:
            record = {
                "payload": base64.b64encode(self.payload).decode("ascii"),
                "validator": self.validator,
            }
            return json.dumps(record).encode("utf-8")
        except (TypeError, ValueError) as exc:
            raise CacheEncodeError(exc) from exc

    @classmethod
    def from_bytes(cls, key: str, raw: bytes) -> "CacheEntry":
        """Decode a record produced by ``to_bytes``; ``key`` is for error reporting."""
        try:
            record = json.loads(raw)
            payload = base64.b64decode(record["payload"], validate=True)
            validator = record.get("validator")
        except (ValueError, KeyError, TypeError, binascii.Error) as exc:
            raise CacheDecodeError(key, exc) from exc

        if validator is not None and not isinstance(validator, str):
            raise CacheDecodeError(key, TypeError("validator must be a string"))

        return cls(payload=payload, validator=validator)

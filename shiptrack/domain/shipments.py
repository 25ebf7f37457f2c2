"""Domain helpers for shipment records (wire mapping, ids, lookups)."""
from __future__ import annotations

import json
import secrets
import time
from dataclasses import dataclass, field
from typing import Any, Mapping

REQUIRED_FIELDS = ("trackingNo", "sender", "receiver")
ID_PREFIX = "s_"

# wire key -> attribute name
_WIRE_TO_ATTR = {
    "id": "id",
    "trackingNo": "tracking_no",
    "sender": "sender",
    "receiver": "receiver",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}
_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


@dataclass
class Shipment:
    """A shipment record: the fields the service reasons about plus free-form extras."""

    id: str | None = None
    tracking_no: Any = None
    sender: Any = None
    receiver: Any = None
    created_at: int | None = None
    updated_at: int | None = None
    extra: dict[str, Any] = field(default_factory=dict)
    _key_order: tuple[str, ...] = field(default=(), repr=False, compare=False)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Shipment":
        known: dict[str, Any] = {}
        extra: dict[str, Any] = {}
        for key, value in payload.items():
            attr = _WIRE_TO_ATTR.get(key)
            if attr:
                known[attr] = value
            else:
                extra[key] = value
        return cls(**known, extra=extra, _key_order=tuple(payload.keys()))

    def to_dict(self) -> dict[str, Any]:
        """Wire/disk representation; keeps the key order the record arrived with."""
        out: dict[str, Any] = {}
        for key in self._key_order:
            attr = _WIRE_TO_ATTR.get(key)
            if attr:
                out[key] = getattr(self, attr)
            elif key in self.extra:
                out[key] = self.extra[key]
        for key, attr in _WIRE_TO_ATTR.items():
            value = getattr(self, attr)
            if key not in out and value is not None:
                out[key] = value
        for key, value in self.extra.items():
            out.setdefault(key, value)
        return out


def _is_blank(value: Any) -> bool:
    if isinstance(value, str):
        return not value.strip()
    return not value


def missing_required_fields(payload: Mapping[str, Any]) -> list[str]:
    """Names of required fields that are absent or empty."""
    return [name for name in REQUIRED_FIELDS if _is_blank(payload.get(name))]


def is_json_safe(record: Any) -> bool:
    """False when the record holds NaN/Infinity or values JSON cannot represent."""
    try:
        json.dumps(record, allow_nan=False)
    except (TypeError, ValueError):
        return False
    return True


def now_ms() -> int:
    return int(time.time() * 1000)


def _to_base36(number: int) -> str:
    if number <= 0:
        return "0"
    digits = []
    while number:
        number, rem = divmod(number, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def new_shipment_id(timestamp_ms: int | None = None) -> str:
    """Random component followed by the base36 timestamp, e.g. ``s_k3j9x0l2m1kq``."""
    stamp = now_ms() if timestamp_ms is None else timestamp_ms
    return f"{ID_PREFIX}{_to_base36(secrets.randbits(52))}{_to_base36(stamp)}"


def tracking_matches(record: Mapping[str, Any], value: str | None) -> bool:
    """Case-insensitive tracking number comparison; absent values compare as ''."""
    current = record.get("trackingNo") if isinstance(record, Mapping) else None
    return str(current or "").lower() == str(value or "").lower()

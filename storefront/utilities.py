# Standard Library
import json
import time
import uuid
import logging
from datetime import datetime, timezone as dt_timezone
from decimal import Decimal, InvalidOperation

# Django
from django.utils import timezone

logger = logging.getLogger(__name__)


def _parse_payload(request):
    """Consistent, tolerant request payload parsing."""
    if isinstance(request.data, dict):
        return request.data
    try:
        body = request.body.decode("utf-8") if request.body else "{}"
        return json.loads(body or "{}")
    except (ValueError, UnicodeDecodeError):
        return {}


def _now():
    return timezone.now()


def _now_ms() -> int:
    return int(time.time() * 1000)


def _to_decimal(val, default="0"):
    """Invalid or non-finite (NaN, Infinity) -> default."""
    try:
        dec = Decimal(str(val))
    except (InvalidOperation, TypeError, ValueError):
        return Decimal(default)
    return dec if dec.is_finite() else Decimal(default)


def _to_optional_decimal(val):
    """Empty/zero/invalid -> None, so "no original price" stays distinguishable."""
    if val in (None, ""):
        return None
    dec = _to_decimal(val, default="0")
    return dec if dec > 0 else None


def _decimal_str(val):
    if val is None:
        return None
    return str(_to_decimal(val))


def _to_int(val, default=0):
    try:
        return int(val)
    except (TypeError, ValueError):
        return default


def _as_bool(val, default=False):
    if val is None or val == "":
        return default
    if isinstance(val, bool):
        return val
    s = str(val).strip().lower()
    if s in ("true", "1", "yes", "on"):
        return True
    if s in ("false", "0", "no", "off"):
        return False
    return default


def _normalize_id(val):
    v = (str(val or "")).strip()
    return v or None


def generate_record_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


def datetime_to_ms(dt):
    if not dt:
        return None
    return int(round(dt.timestamp() * 1000))


def ms_to_datetime(ms):
    try:
        return datetime.fromtimestamp(int(ms) / 1000, tz=dt_timezone.utc)
    except (TypeError, ValueError, OverflowError, OSError):
        return None


def format_rupiah(amount, label="Rp") -> str:
    """
    Format an amount the way id-ID locale does: dot thousands separator,
    comma decimals, no trailing zero decimals.
        100000      -> "Rp 100.000"
        12500.5     -> "Rp 12.500,5"
    """
    dec = _to_decimal(amount).quantize(Decimal("0.01"))
    negative = dec < 0
    dec = abs(dec)
    whole = int(dec)
    frac = dec - whole
    grouped = f"{whole:,}".replace(",", ".")
    if frac:
        grouped += "," + str(frac)[2:].rstrip("0")
    return f"{label} {'-' if negative else ''}{grouped}"

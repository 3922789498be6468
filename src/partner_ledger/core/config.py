"""Application configuration, read from config.json at the project root.

Example config.json::

    {
      "business_name": "Acme Studio",
      "currency_symbol": "₹",
      "zero_hint_policy": "dilute",
      "equity_tolerance": "0.001",
      "log_level": "INFO"
    }

Every key is optional. A missing or unreadable file means defaults.
"""

import json
from dataclasses import dataclass, fields
from decimal import Decimal, InvalidOperation
from enum import Enum
from pathlib import Path
from typing import Optional

from .rebalancer import ZeroHintPolicy


@dataclass
class AppConfig:
    business_name: str = ""
    currency: str = "INR"
    currency_symbol: str = "₹"
    zero_hint_policy: ZeroHintPolicy = ZeroHintPolicy.EQUALIZE
    equity_tolerance: Decimal = Decimal("0.001")
    log_level: str = "WARNING"


# JSON value -> field value; fields not listed are plain strings
_COERCE = {
    "zero_hint_policy": ZeroHintPolicy,
    "equity_tolerance": lambda v: Decimal(str(v)),
    "log_level": lambda v: str(v).upper(),
}

_cached: Optional[AppConfig] = None


def _config_path() -> Path:
    from ..data.database import _find_project_root
    return _find_project_root() / "config.json"


def _from_json(data: dict) -> AppConfig:
    kwargs = {}
    for f in fields(AppConfig):
        if f.name in data:
            kwargs[f.name] = _COERCE.get(f.name, str)(data[f.name])
    return AppConfig(**kwargs)


def _to_json(cfg: AppConfig) -> dict:
    data = {}
    for f in fields(AppConfig):
        value = getattr(cfg, f.name)
        if isinstance(value, Enum):
            value = value.value
        elif isinstance(value, Decimal):
            value = str(value)
        data[f.name] = value
    return data


def get_config() -> AppConfig:
    global _cached
    if _cached is None:
        path = _config_path()
        try:
            data = json.loads(path.read_text(encoding="utf-8")) if path.exists() else {}
            _cached = _from_json(data)
        except (OSError, ValueError, InvalidOperation):
            _cached = AppConfig()
    return _cached


def save_config(cfg: AppConfig) -> None:
    global _cached
    _cached = cfg
    _config_path().write_text(json.dumps(_to_json(cfg), indent=2, ensure_ascii=False), encoding="utf-8")


def reset_config_cache() -> None:
    global _cached
    _cached = None

"""
permitrack.serialize
====================

Conversion between the dataclasses in :pymod:`permitrack.models` and
JSON‑compatible dicts.  Enum fields are written as their labels and
dates stay ISO strings, so a roster file or an HTTP body round‑trips
without loss.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Iterable, List, Tuple

from pydantic import TypeAdapter

from .models import Expat, NotificationSettings

_EXPATS = TypeAdapter(List[Expat])
_SETTINGS = TypeAdapter(NotificationSettings)


def dump_expats(expats: Iterable[Expat]) -> List[Dict[str, Any]]:
    return _EXPATS.dump_python(list(expats), mode="json")


def load_expats(data: List[Dict[str, Any]]) -> Tuple[Expat, ...]:
    return tuple(_EXPATS.validate_python(data))


def dump_settings(settings: NotificationSettings) -> Dict[str, Any]:
    return _SETTINGS.dump_python(settings, mode="json")


def load_settings(data: Dict[str, Any]) -> NotificationSettings:
    return _SETTINGS.validate_python(data)


def load_roster(path: str | os.PathLike) -> Tuple[Expat, ...]:
    """Read a JSON list of expats from *path*."""
    return load_expats(json.loads(Path(path).read_text()))


def save_roster(path: str | os.PathLike, expats: Iterable[Expat]) -> Path:
    path = Path(path)
    path.write_text(json.dumps(dump_expats(expats), indent=2))
    return path

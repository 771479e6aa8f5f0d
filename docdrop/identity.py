"""Storage key generation.

Keys look like ``<milliseconds>-<safe name>``. The millisecond stamp is
strictly increasing per generator, so two uploads landing in the same
millisecond with the same name still get distinct keys.
"""

from __future__ import annotations

import re
import time
from collections.abc import Callable

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
_KEY_PATTERN = re.compile(r"^(\d+)-(.+)$")

DEFAULT_NAME = "file"


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


def safe_name(original_name: str) -> str:
    """Reduce an uploaded filename to a flat name usable as a key.

    Only directories, control characters and leading dots are removed; the
    retrieval URL and the download header quote everything else.
    """
    name = original_name.replace("\\", "/").rsplit("/", 1)[-1]
    name = _CONTROL_CHARS.sub("", name).strip().lstrip(".")
    return name or DEFAULT_NAME


def is_valid_key(key: str) -> bool:
    if not key or key.startswith("."):
        return False
    if "/" in key or "\\" in key:
        return False
    return _CONTROL_CHARS.search(key) is None


def original_name_from_key(key: str) -> str:
    match = _KEY_PATTERN.match(key)
    if match:
        return match.group(2)
    return key


class KeyGenerator:
    def __init__(self, clock: Callable[[], int] = _now_ms) -> None:
        self._clock = clock
        self._last_stamp = 0

    def generate(self, original_name: str) -> str:
        stamp = self._clock()
        if stamp <= self._last_stamp:
            stamp = self._last_stamp + 1
        self._last_stamp = stamp
        return f"{stamp}-{safe_name(original_name)}"

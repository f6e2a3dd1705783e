"""Choosing output paths for translated subtitle files."""

from __future__ import annotations

import os
import time
import uuid


def _extension(path: str) -> str:
    """Return the extension of the last path element, including the dot."""
    for index in range(len(path) - 1, -1, -1):
        char = path[index]
        if char in ("/", os.sep):
            break
        if char == ".":
            return path[index:]
    return ""


def _missing(path: str) -> bool:
    try:
        os.stat(path)
    except FileNotFoundError:
        return True
    except OSError:
        return False
    return False


def _uuid7() -> uuid.UUID:
    millis = (time.time_ns() // 1_000_000) & ((1 << 48) - 1)
    rand = int.from_bytes(os.urandom(10), "big")
    value = (
        millis << 80
        | 0x7 << 76
        | ((rand >> 68) & 0xFFF) << 64
        | 0b10 << 62
        | rand & ((1 << 62) - 1)
    )
    return uuid.UUID(int=value)


def generate_output_path(input_path: str, target_lang: str) -> str:
    """Build '<base>_<lang><ext>', falling back to numbered and UUID suffixes."""
    ext = _extension(input_path)
    base = input_path[: len(input_path) - len(ext)] if ext else input_path
    stem = f"{base}_{target_lang}"

    primary = f"{stem}{ext}"
    if _missing(primary):
        return primary

    for number in range(10):
        candidate = f"{stem}_{number}{ext}"
        if _missing(candidate):
            return candidate

    return f"{stem}_{_uuid7()}{ext}"
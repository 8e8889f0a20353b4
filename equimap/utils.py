"""
Utility functions for EQUIMAP

Provides logging setup, deterministic ID generation, JSON I/O and the
package exception hierarchy.
"""

import hashlib
import json
import logging
from pathlib import Path
from typing import Any, Optional


# ═══════════════════════════════════════════════════════════════════
# LOGGING
# ═══════════════════════════════════════════════════════════════════

def setup_logging(log_level: str = "INFO", log_file: Optional[str] = None) -> None:
    """Configure logging for EQUIMAP"""
    level = getattr(logging, log_level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers
    )


def get_logger(name: str) -> logging.Logger:
    """Get logger instance for module"""
    return logging.getLogger(name)


# ═══════════════════════════════════════════════════════════════════
# ID GENERATION
# ═══════════════════════════════════════════════════════════════════

def stable_id(prefix: str, *parts: str) -> str:
    """Generate a deterministic ID from a prefix and ordered key parts.

    Parts are JSON-encoded as a list before hashing, so ("A|B",) and
    ("A", "B") never produce the same digest.
    """
    payload = json.dumps([prefix, *parts], ensure_ascii=False)
    digest = hashlib.sha1(payload.encode("utf-8")).hexdigest()[:16]
    return f"{prefix}-{digest}"


# ═══════════════════════════════════════════════════════════════════
# FILE I/O
# ═══════════════════════════════════════════════════════════════════

def read_json(file_path: str | Path) -> Any:
    """Read JSON file"""
    with open(file_path, 'r', encoding='utf-8') as f:
        return json.load(f)


def write_json(data: Any, file_path: str | Path, indent: int = 2) -> None:
    """Write JSON file"""
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    with open(file_path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=indent, ensure_ascii=False)


# ═══════════════════════════════════════════════════════════════════
# EXCEPTIONS
# ═══════════════════════════════════════════════════════════════════

class EquimapError(Exception):
    """Base exception for EQUIMAP"""
    pass


class InvalidRecordError(EquimapError):
    """Record is missing a required field or has the wrong shape"""
    pass


class DataLoadError(EquimapError):
    """Data loading error"""
    pass


class ConfigurationError(EquimapError):
    """Settings file could not be read"""
    pass

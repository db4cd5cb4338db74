"""
Utility functions for LiqPass

Provides logging setup, timestamp formatting, and small hashing helpers
"""

import hashlib
import logging
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional


# ═══════════════════════════════════════════════════════════════════
# LOGGING
# ═══════════════════════════════════════════════════════════════════

def setup_logging(log_level: str = "INFO", log_file: Optional[str | Path] = None) -> None:
    """Configure logging for LiqPass"""
    level = getattr(logging, log_level.upper())

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path))

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )


def get_logger(name: str) -> logging.Logger:
    """Get logger instance for module"""
    return logging.getLogger(name)


# ═══════════════════════════════════════════════════════════════════
# TIMESTAMPS
# ═══════════════════════════════════════════════════════════════════

def utc_now_iso() -> str:
    """Current UTC time as ISO-8601 with millisecond precision and ``Z`` suffix.

    Matches the format exchanges and browsers emit (``2024-05-01T12:00:00.123Z``).
    """
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def now_ms() -> int:
    """Current Unix time in milliseconds."""
    return int(time.time() * 1000)


# ═══════════════════════════════════════════════════════════════════
# HASHING
# ═══════════════════════════════════════════════════════════════════

def hash_ip(ip: Optional[str]) -> str:
    """Return a one-way hash of a client IP for privacy-safe logging."""
    if not ip:
        return "unknown"
    return hashlib.sha256(ip.encode()).hexdigest()[:12]

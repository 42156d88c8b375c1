# src/taskmaster_client/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

PACKAGE_LOGGER = "taskmaster_client"

# Console floor per logger prefix (longest match wins). The file log keeps everything.
_CONSOLE_FLOORS: dict[str, int] = {
    # one line per request with its timing
    f"{PACKAGE_LOGGER}.api.http": logging.WARNING,
    # stale-response drops and per-list counts
    f"{PACKAGE_LOGGER}.tasks": logging.INFO,
    # session restore/login chatter would interleave with the prompt
    f"{PACKAGE_LOGGER}.session": logging.WARNING,
    PACKAGE_LOGGER: logging.DEBUG,
    "py.warnings": logging.ERROR,
}
_THIRD_PARTY_FLOOR = logging.ERROR


class _ConsoleNoiseFilter(logging.Filter):
    """Keep the interactive prompt readable; see _CONSOLE_FLOORS."""

    def __init__(self, floors: dict[str, int] | None = None) -> None:
        super().__init__()
        self._floors = sorted((floors or _CONSOLE_FLOORS).items(), key=lambda kv: len(kv[0]), reverse=True)

    def _floor_for(self, name: str) -> int:
        for prefix, level in self._floors:
            if name == prefix or name.startswith(prefix + "."):
                return level
        return _THIRD_PARTY_FLOOR

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= self._floor_for(record.name)


def setup_logging(
    *,
    log_dir: str | Path = ".local/taskmaster",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Console handler (stderr, filtered) plus a full file log under log_dir.

    Call once at startup, before the first log line. Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "taskmaster.log"

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(fmt)
    console.addFilter(_ConsoleNoiseFilter())
    root.addHandler(console)

    file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
    file_handler.setLevel(file_level)
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)

    logging.captureWarnings(True)

    # httpx logs every request at INFO; ours already does (with timing) at DEBUG.
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    return log_file

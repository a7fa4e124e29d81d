# Append-only log of every slowest route found.

import fcntl
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo

DEFAULT_LOG_FILE = "log.txt"
DEFAULT_TZ = ZoneInfo("Europe/Madrid")


def format_entry(line: str, timestamp: datetime) -> str:
    return f"[{timestamp.isoformat(timespec='seconds')}] {line}"


def append_log(line: str, log_path=DEFAULT_LOG_FILE, tz: ZoneInfo = DEFAULT_TZ,
               now: datetime | None = None) -> str:
    """
    Appends '[<timestamp>] <line>' to the log file and returns the entry.
    The file is held under an exclusive lock while writing so entries from
    concurrent runs never interleave.
    """
    timestamp = (now or datetime.now(tz)).astimezone(tz)
    entry = format_entry(line, timestamp)

    path = Path(log_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "a", encoding="utf-8") as log_file:
        fcntl.flock(log_file, fcntl.LOCK_EX)
        try:
            log_file.write(entry + "\n")
            log_file.flush()
        finally:
            fcntl.flock(log_file, fcntl.LOCK_UN)
    return entry

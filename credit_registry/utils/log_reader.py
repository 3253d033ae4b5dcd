"""Read back the daily request log files written by RequestLogger"""

import json
from collections import Counter
from dataclasses import dataclass, fields
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Tuple

from credit_registry.infrastructure.observability.logging import LogEntry

_ENTRY_FIELDS = {f.name for f in fields(LogEntry)}


@dataclass
class LogStats:
    """Aggregate view over a set of log entries"""

    total: int
    by_status: Dict[int, int]
    by_method: Dict[str, int]
    top_paths: List[Tuple[str, int]]
    avg_response_time_ms: int


def find_latest_log_file(log_dir: str | Path) -> Path:
    """
    Newest api_YYYY-MM-DD.log in log_dir.

    Raises:
        FileNotFoundError: If the directory holds no log files
    """
    files = sorted(Path(log_dir).glob("api_*.log"))
    if not files:
        raise FileNotFoundError(f"no log files found in {log_dir}")
    return files[-1]


def parse_line(line: str) -> LogEntry:
    data = json.loads(line)
    data = {k: v for k, v in data.items() if k in _ENTRY_FIELDS}
    data["timestamp"] = datetime.fromisoformat(data["timestamp"])
    return LogEntry(**data)


def read_log_entries(path: str | Path) -> List[LogEntry]:
    """Parse a log file, skipping blank and malformed lines"""
    entries = []
    with open(path, encoding="utf-8") as f:
        for line in f:
            if not line.strip():
                continue
            try:
                entries.append(parse_line(line))
            except (ValueError, KeyError, TypeError):
                continue
    return entries


def latest(entries: List[LogEntry], n: int = 10) -> List[LogEntry]:
    return entries[-n:] if n > 0 else []


def errors(entries: List[LogEntry]) -> List[LogEntry]:
    return [e for e in entries if e.status_code >= 400 or e.error]


def filter_by_path(entries: List[LogEntry], fragment: str) -> List[LogEntry]:
    return [e for e in entries if fragment in e.path]


def compute_stats(entries: List[LogEntry], top: int = 10) -> LogStats:
    total = len(entries)
    paths = Counter(e.path for e in entries)
    return LogStats(
        total=total,
        by_status=dict(Counter(e.status_code for e in entries)),
        by_method=dict(Counter(e.method for e in entries)),
        top_paths=paths.most_common(top),
        avg_response_time_ms=sum(e.response_time_ms for e in entries) // total if total else 0,
    )

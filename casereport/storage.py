from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any


EVENTS_FILENAME = 'events.jsonl'


def safe_artifact_name(filename: str) -> str:
    token = str(filename or '').strip()
    if not token:
        raise ValueError('filename is required')
    name = Path(token).name
    if name != token or name in {'.', '..'}:
        raise ValueError(f'invalid artifact filename: {filename}')
    return name


def write_bytes_atomic(path: Path, payload: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + '.tmp')
    tmp.write_bytes(payload)
    tmp.replace(path)


def read_json(path: Path) -> dict[str, Any]:
    return json.loads(path.read_text(encoding='utf-8'))


def append_event(event: str, *, root: Path, **extra: Any) -> None:
    now = datetime.now(timezone.utc).isoformat()
    row = {
        'ts': now,
        'event': event,
        **extra,
    }
    events_file = root / EVENTS_FILENAME
    events_file.parent.mkdir(parents=True, exist_ok=True)
    with events_file.open('a', encoding='utf-8') as f:
        f.write(json.dumps(row, ensure_ascii=False, default=str) + '\n')


def read_events(*, root: Path) -> list[dict[str, Any]]:
    events_file = root / EVENTS_FILENAME
    if not events_file.exists():
        return []
    rows: list[dict[str, Any]] = []
    for line in events_file.read_text(encoding='utf-8').splitlines():
        line = line.strip()
        if not line:
            continue
        rows.append(json.loads(line))
    return rows

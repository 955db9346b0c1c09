# src/scrappey_actor/io/dataset.py
"""
Where output records go. A dataset is append-only: the actor pushes exactly
one record per successful job and never reads anything back.
"""
from __future__ import annotations

import json
import os
import sys
from typing import Any, Dict, List, TextIO

from scrappey_actor.models import OutputRecord


def _dumps(record: OutputRecord) -> str:
    return json.dumps(record.as_dict(), ensure_ascii=False, default=str)


class DatasetSink:
    def push(self, record: OutputRecord) -> None:
        raise NotImplementedError

    def close(self) -> None:
        return None


class InMemoryDataset(DatasetSink):
    def __init__(self) -> None:
        self.items: List[Dict[str, Any]] = []

    def push(self, record: OutputRecord) -> None:
        self.items.append(record.as_dict())


class JsonlDataset(DatasetSink):
    """
    Append records to a JSONL file, one JSON object per line.
    - Creates the parent directory on first push.
    - Never rewrites existing lines.
    """

    def __init__(self, path: str) -> None:
        self.path = path
        self.count = 0

    def push(self, record: OutputRecord) -> None:
        os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(_dumps(record))
            f.write("\n")
        self.count += 1


class StdoutDataset(DatasetSink):
    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream
        self.count = 0

    def push(self, record: OutputRecord) -> None:
        # resolve lazily so CliRunner's captured stdout is picked up
        stream = self._stream or sys.stdout
        stream.write(_dumps(record) + "\n")
        stream.flush()
        self.count += 1


def open_dataset(target: str) -> DatasetSink:
    """'-' means stdout, anything else is a JSONL file path."""
    if target == "-":
        return StdoutDataset()
    return JsonlDataset(target)

"""Helpers to persist intermediate representations for debugging."""
from __future__ import annotations

import json
from dataclasses import fields, is_dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from docx_pdf.model.elements import DocumentTree


class DebugDumper:
    """Writes intermediate artifacts onto disk for inspection."""

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def dump(self, tree: DocumentTree) -> Path:
        """Persist the parsed document tree as JSON and return the file path."""
        self.directory.mkdir(parents=True, exist_ok=True)
        payload = {
            "metadata": dict(tree.metadata),
            "blocks": [{"kind": type(block).__name__, **self._serialize(block)} for block in tree.blocks],
        }
        target = self.directory / "document_tree.json"
        target.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
        return target

    def _serialize(self, value: Any) -> Any:
        if is_dataclass(value):
            return {f.name: self._serialize(getattr(value, f.name)) for f in fields(value)}
        if isinstance(value, Enum):
            return value.value
        if isinstance(value, dict):
            return {k: self._serialize(v) for k, v in value.items()}
        if isinstance(value, (list, tuple)):
            return [self._serialize(v) for v in value]
        return value

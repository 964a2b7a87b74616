"""Append-only JSONL run log for parse/resolve/generate/validate stages."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Literal

from pydantic import BaseModel, Field

Stage = Literal["parse", "resolve", "generate", "validate"]


class ProvenanceEvent(BaseModel):
    """Structured record for one pipeline step."""

    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    stage: Stage = Field(..., description="Pipeline stage that produced the event.")
    message: str = Field(..., description="Human-readable description of the event.")
    status: Literal["ok", "error"] = "ok"
    payload: Dict[str, Any] = Field(default_factory=dict)


class ProvenanceLogger:
    """Writes one JSON object per line; a ``None`` path turns logging into a no-op."""

    def __init__(self, output_path: Path | None):
        self.output_path = output_path
        if self.output_path is not None:
            self.output_path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def enabled(self) -> bool:
        return self.output_path is not None

    def log(self, event: ProvenanceEvent | Dict[str, Any]) -> ProvenanceEvent:
        """Write a single event to disk and return the normalized object."""
        if not isinstance(event, ProvenanceEvent):
            event = ProvenanceEvent.model_validate(event)
        if self.output_path is not None:
            with self.output_path.open("a", encoding="utf-8") as handle:
                handle.write(event.model_dump_json() + "\n")
        return event

    def extend(self, events: Iterable[ProvenanceEvent | Dict[str, Any]]) -> None:
        for event in events:
            self.log(event)

    def read(self) -> List[ProvenanceEvent]:
        if self.output_path is None or not self.output_path.exists():
            return []
        lines = self.output_path.read_text(encoding="utf-8").splitlines()
        return [ProvenanceEvent.model_validate_json(line) for line in lines if line.strip()]


__all__ = ["ProvenanceEvent", "ProvenanceLogger", "Stage"]

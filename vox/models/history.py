"""History entry model."""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field


class HistoryEntry(BaseModel):
    """A single transcription record, stored as one JSON line."""

    model_config = ConfigDict(populate_by_name=True)

    timestamp: str = Field(alias="ts")
    text: str
    duration_seconds: float = Field(alias="duration_s")

    @classmethod
    def now(cls, text: str, duration_seconds: float) -> "HistoryEntry":
        ts = datetime.now(timezone.utc).replace(microsecond=0)
        return cls(
            timestamp=ts.strftime("%Y-%m-%dT%H:%M:%SZ"),
            text=text,
            duration_seconds=duration_seconds,
        )

    def to_json_line(self) -> str:
        return self.model_dump_json(by_alias=True)

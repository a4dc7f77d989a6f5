"""Record normalizer: raw Airtable records to flat, typed CategoryRecords."""

from dataclasses import dataclass, field
from typing import Any

AFFIRMATIVE = {"true", "si", "sí", "yes", "y", "1", "x"}


@dataclass
class CategoryRecord:
    """A backend record: stable id plus its free-form fields.

    Accessors never raise; absent or malformed fields fall back to
    "", False or [] so filters and scorers can stay branch-free.
    """
    id: str
    fields: dict[str, Any] = field(default_factory=dict)

    def text(self, name: str) -> str:
        value = self.fields.get(name)
        if isinstance(value, list):
            value = value[0] if value else None
        if isinstance(value, str):
            return value.strip()
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return ""

    def flag(self, name: str) -> bool:
        value = self.fields.get(name)
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.strip().lower() in AFFIRMATIVE
        return False

    def tags(self, name: str) -> list[str]:
        value = self.fields.get(name)
        if isinstance(value, str):
            return [value] if value.strip() else []
        if isinstance(value, list):
            return [v for v in value if isinstance(v, str)]
        return []

    def has_value(self, name: str) -> bool:
        value = self.fields.get(name)
        if isinstance(value, str):
            return bool(value.strip())
        return value not in (None, [], {}, False)

    def to_dict(self) -> dict:
        return {"id": self.id, **{k: v for k, v in self.fields.items() if k != "id"}}


def normalize(raw_records: list[dict]) -> list[CategoryRecord]:
    """Flatten raw records, dropping id-less entries and repeated ids (first wins)."""
    seen: set[str] = set()
    records: list[CategoryRecord] = []
    for raw in raw_records:
        if not isinstance(raw, dict):
            continue
        record_id = raw.get("id")
        if not record_id or not isinstance(record_id, str) or record_id in seen:
            continue
        seen.add(record_id)
        fields = raw.get("fields")
        records.append(CategoryRecord(
            id=record_id,
            fields=dict(fields) if isinstance(fields, dict) else {},
        ))
    return records

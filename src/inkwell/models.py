"""Domain models: Fragment, ChangeRecord and the Project aggregate."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

STATUS_DRAFT = "draft"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Fragment:
    id: str
    display_name: str
    content: str
    element_kind: str
    last_modified_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "display_name": self.display_name,
            "content": self.content,
            "element_kind": self.element_kind,
            "last_modified_at": self.last_modified_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Fragment:
        return cls(
            id=str(data["id"]),
            display_name=str(data["display_name"]),
            content=str(data["content"]),
            element_kind=str(data["element_kind"]),
            last_modified_at=datetime.fromisoformat(data["last_modified_at"]),
        )


@dataclass(frozen=True)
class ChangeRecord:
    """One entry of the append-only project history."""

    timestamp: datetime
    description: str
    model_used: str
    change_id: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "description": self.description,
            "model_used": self.model_used,
            "change_id": self.change_id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ChangeRecord:
        return cls(
            timestamp=datetime.fromisoformat(data["timestamp"]),
            description=str(data["description"]),
            model_used=str(data["model_used"]),
            change_id=str(data["change_id"]),
        )


@dataclass(frozen=True)
class Project:
    """Aggregate root. Owns its fragments (ordered) and its history.

    ``assembled_content`` is always derived from ``fragments`` by the
    reassembler; code that changes fragments builds a new Project.
    """

    id: str
    title: str
    initial_prompt: str
    fragments: list[Fragment]
    assembled_content: str
    history: list[ChangeRecord] = field(default_factory=list)
    status: str = STATUS_DRAFT
    created_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "initial_prompt": self.initial_prompt,
            "fragments": [f.to_dict() for f in self.fragments],
            "assembled_content": self.assembled_content,
            "history": [h.to_dict() for h in self.history],
            "status": self.status,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Project:
        return cls(
            id=str(data["id"]),
            title=str(data["title"]),
            initial_prompt=str(data["initial_prompt"]),
            fragments=[Fragment.from_dict(f) for f in data.get("fragments", [])],
            assembled_content=str(data["assembled_content"]),
            history=[ChangeRecord.from_dict(h) for h in data.get("history", [])],
            status=str(data.get("status", STATUS_DRAFT)),
            created_at=datetime.fromisoformat(data["created_at"]),
        )

"""
Identity of a behavior, and the gathered snapshot of its files.

Every record further down the pipeline is keyed by a GatheredRef, the pair of
behavior identity and content hash. A lookup that matches the identity but not
the hash is a stale record.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class Behavior:
    org: str
    repo: str
    name: str

    @property
    def slug(self) -> str:
        return f"{self.org}/{self.repo}/{self.name}"

    def to_dict(self) -> dict[str, str]:
        return {"org": self.org, "repo": self.repo, "name": self.name}

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "Behavior":
        return cls(org=d["org"], repo=d["repo"], name=d["name"])


class BehaviorGatheredStatus(str, Enum):
    WISHED = "wished"
    ENVISIONED = "envisioned"
    CONSTRAINED = "constrained"
    BLUEPRINTED = "blueprinted"
    INFLIGHT = "inflight"
    DELIVERED = "delivered"


@dataclass(frozen=True)
class GatheredFileRef:
    """Reference to one file of a behavior. The content is read on demand."""
    uri: str

    @property
    def file_name(self) -> str:
        return Path(self.uri).name

    def read_text(self) -> str:
        return Path(self.uri).read_text(encoding="utf-8")


@dataclass(frozen=True)
class GatheredRef:
    behavior: Behavior
    content_hash: str

    def to_dict(self) -> dict[str, Any]:
        return {"behavior": self.behavior.to_dict(), "content_hash": self.content_hash}

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "GatheredRef":
        return cls(behavior=Behavior.from_dict(d["behavior"]), content_hash=d["content_hash"])


@dataclass(frozen=True)
class BehaviorGathered:
    behavior: Behavior
    content_hash: str
    status: BehaviorGatheredStatus
    files: tuple[GatheredFileRef, ...] = field(default_factory=tuple)
    gathered_at: str = field(default_factory=utc_now_iso)

    @property
    def ref(self) -> GatheredRef:
        return GatheredRef(behavior=self.behavior, content_hash=self.content_hash)

    def to_dict(self) -> dict[str, Any]:
        return {
            "behavior": self.behavior.to_dict(),
            "content_hash": self.content_hash,
            "status": self.status.value,
            "files": [f.uri for f in self.files],
            "gathered_at": self.gathered_at,
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "BehaviorGathered":
        return cls(
            behavior=Behavior.from_dict(d["behavior"]),
            content_hash=d["content_hash"],
            status=BehaviorGatheredStatus(d["status"]),
            files=tuple(GatheredFileRef(uri=uri) for uri in d.get("files", [])),
            gathered_at=d.get("gathered_at") or utc_now_iso(),
        )


def find_by_ref(records: list[Any], ref: GatheredRef) -> Any:
    """
    Find the record whose `gathered` ref matches both identity and content hash.
    Returns None when there is no match, including when only the hash differs.
    """
    for record in records:
        if record.gathered == ref:
            return record
    return None

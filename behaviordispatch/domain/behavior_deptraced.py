from dataclasses import dataclass, field
from typing import Any
from behaviordispatch.domain.behavior import GatheredRef, utc_now_iso


@dataclass(frozen=True)
class BehaviorDeptraced:
    """
    The dependencies of one behavior.

    depends_on_transitive is always a superset of depends_on_direct.
    Both are deduplicated by behavior identity.
    """
    gathered: GatheredRef
    depends_on_direct: tuple[GatheredRef, ...] = field(default_factory=tuple)
    depends_on_transitive: tuple[GatheredRef, ...] = field(default_factory=tuple)
    deptraced_at: str = field(default_factory=utc_now_iso)

    def to_dict(self) -> dict[str, Any]:
        return {
            "gathered": self.gathered.to_dict(),
            "depends_on_direct": [ref.to_dict() for ref in self.depends_on_direct],
            "depends_on_transitive": [ref.to_dict() for ref in self.depends_on_transitive],
            "deptraced_at": self.deptraced_at,
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "BehaviorDeptraced":
        return cls(
            gathered=GatheredRef.from_dict(d["gathered"]),
            depends_on_direct=tuple(GatheredRef.from_dict(x) for x in d.get("depends_on_direct", [])),
            depends_on_transitive=tuple(GatheredRef.from_dict(x) for x in d.get("depends_on_transitive", [])),
            deptraced_at=d.get("deptraced_at") or utc_now_iso(),
        )

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class AuditEvent:
    action: str
    actor: Any = None
    object_type: str = ""
    object_id: str = ""
    level: str = "info"
    category: str = "system"
    ip_address: Optional[str] = None
    metadata: Optional[dict[str, Any]] = None

    def as_log_kwargs(self) -> dict[str, Any]:
        actor = self.actor if getattr(self.actor, "is_authenticated", False) else None
        return {
            "action": self.action,
            "user": actor,
            "object_type": self.object_type,
            "object_id": str(self.object_id or ""),
            "level": self.level,
            "category": self.category,
            "ip_address": self.ip_address,
            "metadata": self.metadata or {},
        }

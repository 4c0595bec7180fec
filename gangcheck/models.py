from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence


def _opt_id(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise ValueError(f"bad identifier: {value!r}")
    return str(value)


@dataclass
class DailyChecklist:
    current_date: str
    completed: List[str] = field(default_factory=list)
    required_role_id: Optional[str] = None
    panel_channel_id: Optional[str] = None
    panel_message_id: Optional[str] = None

    @classmethod
    def fresh(cls, today: str) -> "DailyChecklist":
        return cls(current_date=today)

    @classmethod
    def from_dict(cls, raw: Any) -> "DailyChecklist":
        """Parse a stored document. Raises ValueError on anything malformed."""
        if not isinstance(raw, dict):
            raise ValueError("checklist document must be an object")

        current_date = raw.get("currentDate")
        if not isinstance(current_date, str) or not current_date:
            raise ValueError("currentDate missing")

        completed_raw = raw.get("completed", [])
        if not isinstance(completed_raw, list):
            raise ValueError("completed must be a list")
        completed: List[str] = []
        for item in completed_raw:
            mid = _opt_id(item)
            if mid is not None and mid not in completed:
                completed.append(mid)

        role = raw.get("requiredRoleId", raw.get("gangRoleId"))
        channel_id = _opt_id(raw.get("panelChannelId"))
        message_id = _opt_id(raw.get("panelMessageId"))
        if channel_id is None or message_id is None:
            channel_id = message_id = None

        return cls(
            current_date=current_date,
            completed=completed,
            required_role_id=_opt_id(role),
            panel_channel_id=channel_id,
            panel_message_id=message_id,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "currentDate": self.current_date,
            "completed": list(self.completed),
            "requiredRoleId": self.required_role_id,
            "panelChannelId": self.panel_channel_id,
            "panelMessageId": self.panel_message_id,
        }

    @property
    def has_panel(self) -> bool:
        return self.panel_channel_id is not None and self.panel_message_id is not None


@dataclass
class Summary:
    # total / remaining_count are None while eligibility is indeterminate
    total: Optional[int]
    done_count: int
    remaining_count: Optional[int]
    remaining: Sequence[Any] = ()

    @property
    def tracked(self) -> bool:
        return self.total is not None

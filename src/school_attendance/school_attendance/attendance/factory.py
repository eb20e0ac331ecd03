from __future__ import annotations

from dataclasses import dataclass

from ..core.constants import DEFAULT_EDIT_WINDOW_HOURS
from ..core.enums import Role
from .policies.admin_policy import AdminEditPolicy
from .policies.base import EditPolicy
from .policies.windowed_policy import WindowedEditPolicy


@dataclass
class EditPolicyFactory:
    """Factory Pattern: choose the edit policy for the acting role."""

    window_hours: int = DEFAULT_EDIT_WINDOW_HOURS

    def for_role(self, role: Role) -> EditPolicy:
        if role == Role.ADMIN:
            return AdminEditPolicy()
        return WindowedEditPolicy(window_hours=int(self.window_hours))

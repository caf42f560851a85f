"""Who may do what to a report.

Kept separate from the lifecycle service so the rules can be read and tested
without a database.
"""
import enum
from typing import Optional

from coastwatch.core.errors import Forbidden
from coastwatch.models.report import Report
from coastwatch.models.user import User, Role


class Action(str, enum.Enum):
    UPDATE_STATUS = "update_status"
    DELETE = "delete"


DENIED_MESSAGES = {
    Action.UPDATE_STATUS: "Forbidden: Only OFFICIAL users can update report status",
    Action.DELETE: "Forbidden: You can only delete your own reports",
}


def is_allowed(actor: Optional[User], report: Optional[Report], action: Action) -> bool:
    if actor is None:
        return False
    if actor.role == Role.OFFICIAL:
        return True
    if action == Action.DELETE:
        return report is not None and report.reporter_id == actor.id
    return False


def authorize(actor: Optional[User], report: Optional[Report], action: Action) -> None:
    if not is_allowed(actor, report, action):
        raise Forbidden(DENIED_MESSAGES[action])

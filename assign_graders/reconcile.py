"""Decide what to do with the graders already shown in the editor."""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Sequence

from assign_graders.errors import CurrentUserNotFoundError
from assign_graders.log import get_logger
from assign_graders.session import UISession

log = get_logger(__name__)

USER_MARKER_SELECTOR = "script[data-user-name]"
USER_MARKER_ATTRIBUTE = "data-user-name"


class Action(enum.Enum):
    SKIP = "skip"
    ASSIGN = "assign"
    REPLACE_DEFAULT = "replace_default"


@dataclass(frozen=True)
class Plan:
    action: Action
    assigned: tuple[str, ...]

    @property
    def removals(self) -> int:
        return 1 if self.action is Action.REPLACE_DEFAULT else 0


def plan(assigned: Sequence[str], current_user: str) -> Plan:
    """Greenhouse puts the hiring lead in as a default grader; that single
    entry is swapped out, anything else already there is kept."""
    names = tuple(n.strip() for n in assigned if n and n.strip())
    if len(names) >= 2:
        return Plan(Action.SKIP, names)
    if len(names) == 1 and names[0] == current_user:
        return Plan(Action.REPLACE_DEFAULT, names)
    return Plan(Action.ASSIGN, names)


def find_current_user(session: UISession) -> str:
    name = session.query_attribute(USER_MARKER_SELECTOR, USER_MARKER_ATTRIBUTE)
    if not name or not name.strip():
        raise CurrentUserNotFoundError("Unable to find user's name in Greenhouse")
    log.info("Signed in as %s", name.strip())
    return name.strip()

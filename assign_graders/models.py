"""Data models for applications and graders."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Application:
    application_id: str
    candidate: str
    job: str
    to_grade: bool


@dataclass(frozen=True)
class Grader:
    name: str
    job: str

"""Pick two distinct graders for an application at random."""
from __future__ import annotations

import random
from typing import Sequence

from assign_graders.errors import NotEnoughGradersError
from assign_graders.models import Application, Grader


class GraderSelector:
    """Uniform sampling without replacement from the graders of one job.

    Pass a seeded ``random.Random`` as ``rng`` for reproducible picks.
    """

    def __init__(self, roster: Sequence[Grader], rng: random.Random | None = None) -> None:
        self.roster: tuple[Grader, ...] = tuple(roster)
        self.rng = rng or random.Random()

    def eligible(self, job: str) -> list[Grader]:
        return [g for g in self.roster if g.job == job]

    def pick(self, application: Application) -> tuple[Grader, Grader]:
        pool = self.eligible(application.job)
        if len(pool) < 2:
            raise NotEnoughGradersError(application.job)

        first = self.rng.choice(pool)
        rest = [g for g in pool if g != first]
        if not rest:
            raise NotEnoughGradersError(application.job)
        second = self.rng.choice(rest)
        return first, second

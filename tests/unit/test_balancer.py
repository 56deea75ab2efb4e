import random

import pytest

from assign_graders.balancer import LoadBalancer, listing_url
from assign_graders.errors import CurrentUserNotFoundError, NotEnoughGradersError
from assign_graders.models import Grader
from assign_graders.reconcile import Action
from tests.helpers import FakeSession, row

BASE = "https://app.greenhouse.io/"
ROSTER = [
    Grader("Ada", "Software Engineer"),
    Grader("Grace", "Software Engineer"),
    Grader("Alan", "Software Engineer"),
    Grader("Katherine", "Data Scientist"),
]


def balancer(session, *, roster=ROSTER, jobs=("Software Engineer",), **kwargs):
    return LoadBalancer(session, roster, set(jobs), BASE, rng=random.Random(3), **kwargs)


def test_listing_url():
    assert listing_url(BASE) == (
        "https://app.greenhouse.io/people?sort_by=last_activity&sort_order=desc"
        "&stage_status_id%5B%5D=2&in_stages%5B%5D=Written+Interview"
    )


def test_assigns_two_graders_and_saves():
    session = FakeSession([[row("1")]])
    summary = balancer(session).execute()

    assigned = session.assigned["1"]
    assert len(assigned) == 2
    assert len(set(assigned)) == 2
    assert set(assigned) <= {"Ada", "Grace", "Alan"}
    assert summary.current_user == "Hannah Lead"
    assert [o.action for o in summary.outcomes] == [Action.ASSIGN]
    assert session.calls[0] == ("goto", listing_url(BASE))


def test_already_graded_application_gets_no_writes():
    session = FakeSession([[row("1")]], assigned={"1": ["Ada", "Grace"]})
    summary = balancer(session).execute()

    assert session.writes() == []
    assert session.assigned["1"] == ["Ada", "Grace"]
    assert len(summary.skipped) == 1


def test_default_assignee_is_replaced():
    session = FakeSession([[row("1")]], assigned={"1": ["Hannah Lead"]})
    summary = balancer(session).execute()

    assigned = session.assigned["1"]
    assert "Hannah Lead" not in assigned
    assert len(assigned) == 2
    first_type = next(i for i, c in enumerate(session.calls) if c[0] == "type")
    assert session.calls[first_type - 2:first_type] == [("press", "Backspace"), ("press", "Backspace")]
    assert summary.outcomes[0].action is Action.REPLACE_DEFAULT


def test_someone_else_already_assigned_is_kept():
    session = FakeSession([[row("1")]], assigned={"1": ["Katherine"]})
    balancer(session).execute()

    assert ("press", "Backspace") not in session.calls
    assert session.assigned["1"][0] == "Katherine"
    assert len(session.assigned["1"]) == 3


def test_not_enough_graders_aborts_before_writing():
    session = FakeSession([[row("1", job="Data Scientist (9)")]])
    with pytest.raises(NotEnoughGradersError):
        balancer(session, jobs=("Data Scientist",)).execute()
    assert session.writes() == []
    assert "1" not in session.assigned


def test_missing_current_user_aborts_the_run():
    session = FakeSession([[row("1")]], user=None)
    with pytest.raises(CurrentUserNotFoundError):
        balancer(session).execute()
    assert session.writes() == []


def test_dry_run_reads_but_never_writes():
    session = FakeSession([[row("1"), row("2")]], assigned={"2": ["Hannah Lead"]})
    summary = balancer(session, dry_run=True).execute()

    assert session.writes() == []
    assert len(summary.assigned) == 2
    assert all(len(o.graders) == 2 for o in summary.assigned)


def test_processes_every_page():
    session = FakeSession(
        [
            [row("1"), row("2", job="Data Scientist (5)")],
            [row("3", toggle="Interviews"), row("4")],
        ],
        assigned={"4": ["Ada", "Alan"]},
    )
    summary = balancer(session).execute()

    assert [o.application.application_id for o in summary.outcomes] == ["1", "4"]
    assert set(session.assigned) == {"1", "4"}
    assert summary.pages_visited == 2
    assert summary.rows_seen == 4


def test_rerun_is_a_no_op():
    session = FakeSession([[row("1"), row("2")]])
    balancer(session).execute()
    session.calls.clear()

    summary = balancer(session).execute()
    assert session.writes() == []
    assert len(summary.skipped) == 2


def test_dry_run_closes_each_editor():
    session = FakeSession([[row("1"), row("2")]])
    balancer(session, dry_run=True).execute()

    escapes = [i for i, c in enumerate(session.calls) if c == ("press", "Escape")]
    edits = [i for i, c in enumerate(session.calls) if c[0] == "click" and "graders-link" in c[1]]
    assert len(escapes) == 2
    assert edits[0] < escapes[0] < edits[1] < escapes[1]


def test_summary_survives_a_later_failure():
    session = FakeSession([[row("1"), row("2", job="Data Scientist (9)")]])
    lb = balancer(session, jobs=("Software Engineer", "Data Scientist"))

    with pytest.raises(NotEnoughGradersError):
        lb.execute()

    assert len(session.assigned["1"]) == 2
    assert [o.application.application_id for o in lb.summary.assigned] == ["1"]
    assert "Data Scientist" in lb.summary.aborted
    assert lb.summary.pages_visited == 1

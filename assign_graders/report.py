"""Markdown summary of one assignment run."""
from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from assign_graders.balancer import RunSummary
from assign_graders.config import REPORTS_DIR
from assign_graders.log import get_logger
from assign_graders.reconcile import Action

log = get_logger(__name__)

_ACTION_LABELS: dict[Action, str] = {
    Action.ASSIGN: "Assigned",
    Action.REPLACE_DEFAULT: "Assigned (replaced default)",
    Action.SKIP: "Already graded",
}


def build_run_report(summary: RunSummary, *, now: datetime | None = None) -> str:
    stamp = (now or datetime.now(timezone.utc)).strftime("%Y-%m-%d %H:%M")
    title = "Grader Assignment Report"
    if summary.dry_run:
        title += " (dry run)"
    if summary.aborted:
        title += " (aborted)"
    lines: list[str] = [f"# {title} — {stamp}", ""]

    lines.append(
        f"**{len(summary.assigned)}** assigned | **{len(summary.skipped)}** already graded"
        f" | **{summary.pages_visited}** page(s) | **{summary.rows_dropped}** unreadable row(s)"
    )
    if summary.current_user:
        lines.append(f"Run by {summary.current_user}")
    if summary.aborted:
        lines.append("")
        lines.append(f"**Run stopped early:** {summary.aborted}")
    lines.append("")

    if summary.assigned:
        lines.append("## Assignments")
        lines.append("")
        lines.append("| # | Candidate | Job | Graders | Note |")
        lines.append("|--:|-----------|-----|---------|------|")
        for i, o in enumerate(summary.assigned, 1):
            graders = ", ".join(g.name for g in o.graders)
            note = _ACTION_LABELS[o.action] if o.action is Action.REPLACE_DEFAULT else ""
            if o.action is Action.ASSIGN and o.already_assigned:
                note = f"kept {', '.join(o.already_assigned)}"
            lines.append(f"| {i} | {o.application.candidate} | {o.application.job} | {graders} | {note} |")
        lines.append("")

    if summary.skipped:
        lines.append("## Already Graded")
        lines.append("")
        for o in summary.skipped:
            lines.append(
                f"- **{o.application.candidate}** ({o.application.job}) — {', '.join(o.already_assigned)}"
            )
        lines.append("")

    if not summary.outcomes and not summary.aborted:
        lines.append("_Nothing to do: no written interviews with a scorecard due for the selected jobs._")
        lines.append("")

    per_grader: dict[str, int] = {}
    for o in summary.assigned:
        for g in o.graders:
            per_grader[g.name] = per_grader.get(g.name, 0) + 1
    if per_grader:
        lines.append("## Load")
        lines.append("")
        for name, count in sorted(per_grader.items(), key=lambda kv: (-kv[1], kv[0])):
            lines.append(f"- {name}: {count}")
        lines.append("")

    return "\n".join(lines)


def write_run_report(content: str, reports_dir: Path | None = None) -> Path:
    target = reports_dir or REPORTS_DIR
    target.mkdir(parents=True, exist_ok=True)
    path = target / f"assignments_{datetime.now(timezone.utc).strftime('%Y-%m-%d_%H%M%S')}.md"
    path.write_text(content, encoding="utf-8")
    log.info("Report written → %s", path)
    return path

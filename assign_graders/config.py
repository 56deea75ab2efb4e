"""Load the grader roster, the job filter and env settings."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from assign_graders.errors import ConfigError
from assign_graders.log import get_logger
from assign_graders.models import Grader

log = get_logger(__name__)

load_dotenv()

ROOT_DIR: Path = Path(__file__).resolve().parent.parent
CONFIG_DIR: Path = ROOT_DIR / "config"
GRADERS_PATH: Path = CONFIG_DIR / "graders.yaml"
REPORTS_DIR: Path = ROOT_DIR / "reports"
PROFILE_DIR: Path = ROOT_DIR / ".browser-profile"

DEFAULT_BASE_URL = "https://app.greenhouse.io/"
DEFAULT_TIMEOUT_MS = 30_000


def get_env(key: str, default: str = "") -> str:
    return os.environ.get(key, default).strip()


def get_base_url() -> str:
    url = get_env("GREENHOUSE_URL", DEFAULT_BASE_URL) or DEFAULT_BASE_URL
    return url if url.endswith("/") else url + "/"


def get_timeout_ms() -> int:
    raw = get_env("UI_TIMEOUT_MS")
    if not raw:
        return DEFAULT_TIMEOUT_MS
    try:
        value = int(raw)
    except ValueError:
        raise ConfigError(f"UI_TIMEOUT_MS must be an integer, got {raw!r}") from None
    if value <= 0:
        raise ConfigError("UI_TIMEOUT_MS must be positive")
    return value


def get_headless() -> bool:
    return get_env("RUN_HEADLESS", "false").lower() in ("1", "true", "yes")


def get_profile_dir() -> Path:
    raw = get_env("BROWSER_PROFILE_DIR")
    return Path(raw).expanduser() if raw else PROFILE_DIR


def get_graders_path() -> Path:
    raw = get_env("GRADERS_FILE")
    return Path(raw).expanduser() if raw else GRADERS_PATH


def _as_str_list(value: Any, what: str) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        raise ConfigError(f"{what} must be a list of strings")
    out = [str(v).strip() for v in value if v is not None and str(v).strip()]
    return list(dict.fromkeys(out))


def parse_roster(data: dict[str, Any]) -> tuple[list[Grader], set[str]]:
    """Expand the YAML document into one Grader per (name, job) and the job filter."""
    if not isinstance(data, dict):
        raise ConfigError("Graders file must be a mapping with 'jobs' and 'graders'")

    jobs = _as_str_list(data.get("jobs"), "'jobs'")
    if not jobs:
        raise ConfigError("No jobs configured — add at least one title under 'jobs'")

    entries = data.get("graders") or []
    if not isinstance(entries, list):
        raise ConfigError("'graders' must be a list")

    graders: list[Grader] = []
    seen: set[Grader] = set()
    for i, entry in enumerate(entries, 1):
        if not isinstance(entry, dict) or not str(entry.get("name") or "").strip():
            raise ConfigError(f"Grader #{i} needs a 'name'")
        name = str(entry["name"]).strip()
        grader_jobs = _as_str_list(entry.get("jobs", entry.get("job")), f"jobs of {name!r}")
        if not grader_jobs:
            raise ConfigError(f"Grader {name!r} has no jobs")
        for job in grader_jobs:
            g = Grader(name=name, job=job)
            if g not in seen:
                seen.add(g)
                graders.append(g)

    if not graders:
        raise ConfigError("No graders configured")

    for job in jobs:
        count = sum(1 for g in graders if g.job == job)
        if count < 2:
            log.warning("Job %r has only %d grader(s); its applications will fail", job, count)

    return graders, set(jobs)


def load_roster(path: Path | None = None) -> tuple[list[Grader], set[str]]:
    path = path or get_graders_path()
    if not path.exists():
        raise ConfigError(f"Graders file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Could not parse {path.name}: {exc}") from exc
    graders, jobs = parse_roster(data or {})
    log.info("Loaded %d grader entries for %d job(s) from %s", len(graders), len(jobs), path.name)
    return graders, jobs

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Sequence

import yaml

from .command import CmdResult, run_cmd

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContainerStatus:
    name: str
    service: str
    state: str
    health: str
    status: str

    @property
    def ready(self) -> bool:
        # No declared health check counts as ready once the container runs.
        return self.state == "running" and self.health in ("", "healthy")


def parse_ps_json(text: str) -> List[ContainerStatus]:
    """Parse `docker compose ps --format json`.

    Compose releases before 2.21 print one JSON array; later ones print one
    object per line. Both are accepted.
    """

    text = text.strip()
    if not text:
        return []

    rows: List[Dict[str, Any]]
    if text.startswith("["):
        rows = json.loads(text)
    else:
        rows = [json.loads(line) for line in text.splitlines() if line.strip()]

    out: List[ContainerStatus] = []
    for row in rows:
        out.append(
            ContainerStatus(
                name=str(row.get("Name") or ""),
                service=str(row.get("Service") or ""),
                state=str(row.get("State") or "").lower(),
                health=str(row.get("Health") or "").lower(),
                status=str(row.get("Status") or ""),
            )
        )
    return out


def services_with_healthcheck(config: Dict[str, Any]) -> List[str]:
    """Names of services in a resolved compose config that declare an enabled health check."""

    services = config.get("services") or {}
    out: List[str] = []
    for name, svc in services.items():
        hc = (svc or {}).get("healthcheck")
        if not hc or hc.get("disable"):
            continue
        test = hc.get("test")
        if test in (["NONE"], "NONE"):
            continue
        out.append(str(name))
    return sorted(out)


class Compose:
    """Thin wrapper over the `docker compose` CLI for one project."""

    def __init__(self, manifest: Path, project_dir: Path, *, dry_run: bool = False) -> None:
        self.manifest = manifest
        self.project_dir = project_dir
        self.dry_run = dry_run

    def _argv(self, *args: str) -> List[str]:
        return [
            "docker",
            "compose",
            "-f",
            str(self.manifest),
            "--project-directory",
            str(self.project_dir),
            *args,
        ]

    def _run(self, args: Sequence[str], *, check: bool = True) -> CmdResult:
        return run_cmd(self._argv(*args), check=check, cwd=str(self.project_dir), dry_run=self.dry_run)

    def validate(self) -> bool:
        r = self._run(["config", "-q"], check=False)
        if not r.ok and r.stderr:
            logger.error("%s", r.stderr.strip())
        return r.ok

    def config(self) -> Dict[str, Any]:
        r = self._run(["config"])
        data = yaml.safe_load(r.stdout) or {}
        if not isinstance(data, dict):
            raise ValueError("docker compose config did not return a mapping")
        return data

    def pull(self) -> None:
        self._run(["pull"])

    def up(self) -> None:
        self._run(["up", "-d"])

    def ps_table(self) -> str:
        return self._run(["ps"]).stdout

    def ps(self) -> List[ContainerStatus]:
        return parse_ps_json(self._run(["ps", "--all", "--format", "json"]).stdout)

    def logs(self, tail: int) -> str:
        r = self._run(["logs", f"--tail={tail}"], check=False)
        return r.stdout + r.stderr

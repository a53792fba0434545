from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from typing import Optional

from .command import run_cmd

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DockerProbe:
    docker_version: Optional[str]
    compose_version: Optional[str]

    @property
    def usable(self) -> bool:
        return bool(self.docker_version and self.compose_version)


def probe_docker(*, dry_run: bool = False) -> DockerProbe:
    """Report the docker CLI and compose plugin versions (None when missing)."""

    if shutil.which("docker") is None and not dry_run:
        return DockerProbe(docker_version=None, compose_version=None)

    r = run_cmd(["docker", "--version"], check=False, dry_run=dry_run)
    docker_version = r.stdout.strip() if r.ok else None

    r = run_cmd(["docker", "compose", "version"], check=False, dry_run=dry_run)
    compose_version = r.stdout.strip() if r.ok else None

    if dry_run:
        docker_version = docker_version or "dry-run"
        compose_version = compose_version or "dry-run"

    return DockerProbe(docker_version=docker_version, compose_version=compose_version)


def run_install_script(url: str, *, dry_run: bool = False) -> None:
    """Fetch the upstream convenience installer and run it with sh."""

    r = run_cmd(["curl", "-fsSL", url], dry_run=dry_run)
    if dry_run:
        logger.info("Would run install script from %s", url)
        return
    run_cmd(["sh", "-s"], input_text=r.stdout)


def enable_service(name: str, *, dry_run: bool = False) -> None:
    run_cmd(["systemctl", "start", name], dry_run=dry_run)
    run_cmd(["systemctl", "enable", name], dry_run=dry_run)

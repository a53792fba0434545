from __future__ import annotations

import logging
from typing import Any, Dict

from ..errors import DeployError
from ..lib.docker import enable_service, probe_docker, run_install_script
from ..pipeline import DeployCtx

logger = logging.getLogger(__name__)


class InstallDockerStep:
    step_id = "20_install_docker"

    def run(self, ctx: DeployCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        probe = probe_docker(dry_run=ctx.dry_run)
        if probe.usable:
            logger.info("Docker and Docker Compose are already installed")
            logger.info("Docker version: %s", probe.docker_version)
            logger.info("Docker Compose version: %s", probe.compose_version)
            state["docker"] = {"installed": False, "docker_version": probe.docker_version, "compose_version": probe.compose_version}
            return state

        logger.info("Installing Docker...")
        run_install_script(ctx.cfg.docker_install_url, dry_run=ctx.dry_run)
        enable_service("docker", dry_run=ctx.dry_run)

        probe = probe_docker(dry_run=ctx.dry_run)
        if not probe.usable:
            raise DeployError("Docker installation failed")

        logger.info("Docker installed successfully: %s", probe.docker_version)
        logger.info("Docker Compose version: %s", probe.compose_version)
        state["docker"] = {"installed": True, "docker_version": probe.docker_version, "compose_version": probe.compose_version}
        return state

from __future__ import annotations

import logging
from typing import Any, Dict, List

from rich.text import Text

from ..errors import DeployError
from ..lib.compose import Compose, ContainerStatus, services_with_healthcheck
from ..pipeline import DeployCtx
from .step_00_check_preconditions import require_manifest

logger = logging.getLogger(__name__)


def compose_for(ctx: DeployCtx) -> Compose:
    return Compose(ctx.cfg.manifest_path, ctx.cfg.project_dir, dry_run=ctx.dry_run)


_ALIVE_STATES = ("running", "created", "restarting")


def _stopped(containers: List[ContainerStatus], watched: List[str]) -> List[str]:
    by_service = {c.service: c for c in containers}
    return [s for s in watched if by_service.get(s) is None or by_service[s].state not in _ALIVE_STATES]


def _pending(containers: List[ContainerStatus], watched: List[str]) -> List[str]:
    by_service = {c.service: c for c in containers}
    return [s for s in watched if by_service.get(s) is None or by_service[s].health != "healthy"]


def wait_for_stack(ctx: DeployCtx, compose: Compose, watched: List[str]) -> Dict[str, Any]:
    """Wait until the stack settles.

    With health checks declared, poll compose until every watched service is
    healthy, one turns unhealthy or stops, or the timeout passes. Without any, fall
    back to a fixed delay.
    """

    cfg = ctx.cfg
    if not watched:
        logger.info("Waiting for services to start (this may take a minute)...")
        ctx.sleep(cfg.wait_seconds)
        return {"mode": "fixed", "waited_seconds": cfg.wait_seconds}

    logger.info("Waiting for health checks of: %s", ", ".join(watched))
    deadline = ctx.clock() + cfg.health_timeout_seconds
    started = ctx.clock()
    while True:
        containers = compose.ps()
        unhealthy = [c.service for c in containers if c.service in watched and c.health == "unhealthy"]
        if unhealthy:
            logger.warning("Health check failing for: %s", ", ".join(unhealthy))
            outcome = "unhealthy"
            break
        stopped = _stopped(containers, watched)
        if stopped:
            logger.warning("Stopped before becoming healthy: %s", ", ".join(stopped))
            outcome = "exited"
            break
        pending = _pending(containers, watched)
        if not pending:
            outcome = "healthy"
            break
        if ctx.clock() >= deadline:
            logger.warning("Timed out waiting for: %s", ", ".join(pending))
            outcome = "timeout"
            break
        logger.info("Still starting: %s", ", ".join(pending))
        ctx.sleep(cfg.poll_interval_seconds)

    return {"mode": "poll", "outcome": outcome, "waited_seconds": round(ctx.clock() - started, 1)}


class LaunchStackStep:
    step_id = "40_launch_stack"

    def run(self, ctx: DeployCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = ctx.cfg
        logger.info("Starting service deployment...")

        require_manifest(ctx)

        compose = compose_for(ctx)
        if not compose.validate():
            raise DeployError(f"Invalid {cfg.manifest} file")

        watched = [] if ctx.dry_run else services_with_healthcheck(compose.config())

        logger.info("Pulling Docker images...")
        compose.pull()

        logger.info("Starting services...")
        compose.up()

        wait = wait_for_stack(ctx, compose, watched)

        logger.info("Checking service status...")
        ctx.console.print(Text(compose.ps_table().rstrip()))

        containers = [] if ctx.dry_run else compose.ps()
        if containers and not all(c.ready for c in containers):
            logger.warning("Some services may not be fully healthy. Checking logs...")
            ctx.console.print(Text(compose.logs(cfg.log_tail).rstrip()))

        state["stack"] = {
            "manifest": str(cfg.manifest_path),
            "healthcheck_services": watched,
            "wait": wait,
        }
        return state

from __future__ import annotations

import logging
from typing import Any, Dict

from rich.text import Text

from ..errors import DeployError
from ..pipeline import DeployCtx
from .step_40_launch_stack import compose_for

logger = logging.getLogger(__name__)


class HealthCheckStep:
    """Fail the run when no container of the stack is ready.

    A container is ready when it runs and its health check passes, or when it
    declares no health check at all.
    """

    step_id = "50_health_check"

    def run(self, ctx: DeployCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        logger.info("Performing health check...")

        compose = compose_for(ctx)
        if ctx.dry_run:
            compose.ps()
            logger.info("Dry run: skipping health evaluation")
            return state

        containers = compose.ps()
        ready = [c for c in containers if c.ready]
        not_ready = [c for c in containers if not c.ready]

        state["health"] = {
            "containers": [
                {"name": c.name, "service": c.service, "state": c.state, "health": c.health, "ready": c.ready}
                for c in containers
            ],
        }

        if not ready:
            logger.error("Some services failed to start")
            ctx.console.print(Text(compose.ps_table().rstrip()))
            ctx.console.print(Text(compose.logs(ctx.cfg.log_tail).rstrip()))
            raise DeployError("Health check failed: no container is running")

        if not_ready:
            logger.warning(
                "Services not ready: %s",
                ", ".join(f"{c.service} ({c.health or c.state})" for c in not_ready),
            )
        else:
            logger.info("All services are running")
        return state

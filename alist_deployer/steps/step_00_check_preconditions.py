from __future__ import annotations

import logging
import os
from typing import Any, Dict

from ..errors import DeployError
from ..pipeline import DeployCtx

logger = logging.getLogger(__name__)


def require_root(ctx: DeployCtx) -> int:
    euid = os.geteuid()
    if euid != 0:
        if not ctx.dry_run:
            raise DeployError("Please run this script as root")
        logger.warning("Not running as root (uid=%s); continuing because this is a dry run", euid)
    return euid


def require_manifest(ctx: DeployCtx) -> None:
    cfg = ctx.cfg
    if not cfg.manifest_path.is_file():
        raise DeployError(
            f"{cfg.manifest} file not found in {cfg.project_dir}. Please run this script in the correct directory."
        )


class CheckPreconditionsStep:
    """Root privileges and a manifest are required before anything touches the host."""

    step_id = "00_check_preconditions"

    def run(self, ctx: DeployCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        state["euid"] = require_root(ctx)

        require_manifest(ctx)
        logger.info("Using manifest %s", ctx.cfg.manifest_path)
        return state

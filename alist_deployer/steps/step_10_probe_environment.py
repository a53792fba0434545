from __future__ import annotations

import logging
from typing import Any, Dict

from ..lib.hostinfo import snapshot_host
from ..pipeline import DeployCtx

logger = logging.getLogger(__name__)


class ProbeEnvironmentStep:
    """Warn about a small host; never blocks the deployment."""

    step_id = "10_probe_environment"

    def run(self, ctx: DeployCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = ctx.cfg
        logger.info("Checking system requirements...")

        host = snapshot_host(disk_path=cfg.disk_path)
        warnings = []

        if host.mem_gb is None:
            warnings.append("memory")
            logger.warning("Memory size unknown (Recommended: %sGB+)", cfg.recommended_memory_gb)
        elif host.mem_gb < cfg.min_memory_gb:
            warnings.append("memory")
            logger.warning(
                "Low memory detected: %sGB (Recommended: %sGB+)", host.mem_gb, cfg.recommended_memory_gb
            )
        else:
            logger.info("Memory: %sGB", host.mem_gb)

        if host.disk_free_gb is None:
            warnings.append("disk")
            logger.warning("Disk space unknown (Recommended: %sGB+ free)", cfg.recommended_disk_gb)
        elif host.disk_free_gb < cfg.min_disk_gb:
            warnings.append("disk")
            logger.warning(
                "Low disk space: %sGB free (Recommended: %sGB+ free)", host.disk_free_gb, cfg.recommended_disk_gb
            )
        else:
            logger.info("Disk space: %sGB free", host.disk_free_gb)

        state["host"] = {
            "mem_gb": host.mem_gb,
            "disk_free_gb": host.disk_free_gb,
            "disk_path": host.disk_path,
            "warnings": warnings,
        }
        return state

from __future__ import annotations

import logging
import stat
from typing import Any, Dict

from ..pipeline import DeployCtx

logger = logging.getLogger(__name__)


class CreateDirectoriesStep:
    step_id = "30_create_directories"

    def run(self, ctx: DeployCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = ctx.cfg
        logger.info("Creating configuration directories...")

        created = []
        existing = []
        for d in cfg.layout_dirs:
            if d.is_dir():
                existing.append(str(d))
                logger.info("Directory already exists: %s", d)
                mode = stat.S_IMODE(d.stat().st_mode)
                if mode != cfg.dir_mode:
                    logger.info("Fixing permissions on %s (%o -> %o)", d, mode, cfg.dir_mode)
                    if not ctx.dry_run:
                        d.chmod(cfg.dir_mode)
                continue

            created.append(str(d))
            if ctx.dry_run:
                logger.info("Would create %s", d)
                continue
            d.mkdir(parents=True, exist_ok=True)
            # mkdir is subject to the umask; set the mode explicitly.
            d.chmod(cfg.dir_mode)
            logger.info("Created %s", d)

        state.setdefault("layout", {})["created_dirs"] = created
        state.setdefault("layout", {})["existing_dirs"] = existing
        logger.info("Directories ready (%d created, %d already present)", len(created), len(existing))
        return state

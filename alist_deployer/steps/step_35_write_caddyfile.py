from __future__ import annotations

import logging
from typing import Any, Dict

from ..lib.caddyfile import render_caddyfile
from ..pipeline import DeployCtx

logger = logging.getLogger(__name__)


class WriteCaddyfileStep:
    """Write the default Caddyfile unless one is already there.

    An existing file is never rewritten, so manual edits survive reruns.
    """

    step_id = "35_write_caddyfile"

    def run(self, ctx: DeployCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        path = ctx.cfg.caddyfile_path
        layout = state.setdefault("layout", {})
        layout["caddyfile"] = str(path)

        if path.is_file():
            logger.info("Caddyfile already exists, skipping creation")
            layout["caddyfile_written"] = False
            return state

        logger.info("Creating Caddyfile configuration...")
        contents = render_caddyfile(ctx.cfg.sites)
        if ctx.dry_run:
            logger.info("Would write %s", path)
        else:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(contents, encoding="utf-8")
            logger.info("Caddyfile created successfully")

        layout["caddyfile_written"] = True
        return state

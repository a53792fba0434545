from __future__ import annotations

import argparse
import logging
from typing import Any, Dict, Optional

from rich.console import Console

from .config import load_deploy_config
from .errors import DeployError
from .logging_utils import DEFAULT_LOG_PATH, configure_logging
from .pipeline import DeployCtx, new_state, run_pipeline
from .steps import (
    CheckPreconditionsStep,
    CreateDirectoriesStep,
    HealthCheckStep,
    InstallDockerStep,
    LaunchStackStep,
    ProbeEnvironmentStep,
    ShowSummaryStep,
    WriteCaddyfileStep,
)
from .steps.step_00_check_preconditions import require_root

logger = logging.getLogger(__name__)


def build_steps():
    return [
        CheckPreconditionsStep(),
        ProbeEnvironmentStep(),
        InstallDockerStep(),
        CreateDirectoriesStep(),
        WriteCaddyfileStep(),
        LaunchStackStep(),
        HealthCheckStep(),
        ShowSummaryStep(),
    ]


def run(
    *,
    config_path: Optional[str] = None,
    project_dir: Optional[str] = None,
    log_path: str = DEFAULT_LOG_PATH,
    start_at: Optional[str] = None,
    stop_after: Optional[str] = None,
    dry_run: bool = False,
    console: Optional[Console] = None,
) -> Dict[str, Any]:
    """Run the deployment pipeline once and return the run state."""

    console = console or Console()
    actual_log_path = configure_logging(log_path=log_path)

    cfg = load_deploy_config(config_path, project_dir=project_dir)
    ctx = DeployCtx(cfg=cfg, dry_run=dry_run, console=console)

    state = new_state()
    state["execution"]["log_path"] = actual_log_path
    state["execution"]["project_dir"] = str(cfg.project_dir)

    logger.info("Starting deployment process...")
    try:
        # Checked outside the step list so --start-at cannot skip it.
        state["euid"] = require_root(ctx)
        result = run_pipeline(
            ctx=ctx,
            state=state,
            steps=build_steps(),
            start_at=start_at,
            stop_after=stop_after,
        )
        return result.state
    except DeployError as e:
        state["execution"]["errors"].append(
            {
                "step": state["execution"].get("current_step"),
                "error": str(e),
            }
        )
        raise


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="alist-deploy", description="Deploy Alist behind Caddy with docker compose.")
    p.add_argument("--config", default=None, help="Path to deploy config (yaml); ./deploy.yaml is used if present")
    p.add_argument("--project-dir", default=None, help="Directory holding docker-compose.yml and config/")
    p.add_argument("--log", default=DEFAULT_LOG_PATH, help="Path to deployer log")
    p.add_argument("--start-at", default=None, help="Start at step_id (e.g. 40_launch_stack)")
    p.add_argument("--stop-after", default=None, help="Stop after step_id")
    p.add_argument("--dry-run", action="store_true", help="Log commands and file writes without executing them")

    args = p.parse_args(argv)

    console = Console()
    console.rule("Docker & Alist One-Click Deployment")

    try:
        run(
            config_path=args.config,
            project_dir=args.project_dir,
            log_path=args.log,
            start_at=args.start_at,
            stop_after=args.stop_after,
            dry_run=bool(args.dry_run),
            console=console,
        )
    except (DeployError, FileNotFoundError, ValueError) as e:
        logger.error("%s", e)
        return 1
    return 0

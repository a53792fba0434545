from __future__ import annotations

import logging
from typing import Any, Dict, List

from rich.panel import Panel
from rich.text import Text

from ..pipeline import DeployCtx

logger = logging.getLogger(__name__)

MANAGEMENT_COMMANDS = [
    ("View service status", "docker compose ps"),
    ("View logs", "docker compose logs -f"),
    ("Stop services", "docker compose down"),
    ("Restart services", "docker compose restart"),
    ("Update services", "docker compose pull && docker compose up -d"),
]


def render_summary(ctx: DeployCtx, state: Dict[str, Any]) -> Text:
    cfg = ctx.cfg
    services: List[str] = [c["service"] for c in (state.get("health") or {}).get("containers") or []]
    if not services:
        services = ["caddy"] + [site.service for site in cfg.sites]

    t = Text()
    t.append("Services deployed:\n", style="bold")
    for name in dict.fromkeys(services):
        t.append(f"  - {name}\n")

    t.append("\nAccess URLs:\n", style="bold")
    for site in cfg.sites:
        t.append(f"  - {site.service}: ")
        t.append(f"{site.url}\n", style="cyan")

    t.append("\nManagement Commands:\n", style="bold")
    for label, cmd in MANAGEMENT_COMMANDS:
        t.append(f"  # {label}\n", style="dim")
        t.append(f"  {cmd}\n\n")

    t.append("Important Notes:\n", style="bold")
    for site in cfg.sites:
        t.append(f"  - Ensure {site.hostname} DNS points to this server\n")
    t.append("  - SSL certificates will be auto-generated by Caddy\n")
    t.append("  - Services will auto-start on system reboot\n")
    t.append("  - Check logs if you encounter issues: docker compose logs")
    return t


class ShowSummaryStep:
    step_id = "90_show_summary"

    def run(self, ctx: DeployCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        ctx.console.print()
        ctx.console.print(Panel(render_summary(ctx, state), title="Deployment Complete!", border_style="green"))
        logger.info("Deployment completed successfully!")
        return state

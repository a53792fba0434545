from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence

from rich.console import Console

from .config import DeployConfig
from .errors import DeployError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeployCtx:
    cfg: DeployConfig
    dry_run: bool = False
    console: Console = field(default_factory=Console)
    sleep: Callable[[float], None] = time.sleep
    clock: Callable[[], float] = time.monotonic


class Step(Protocol):
    """A single idempotent step."""

    step_id: str

    def run(self, ctx: DeployCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        ...


@dataclass(frozen=True)
class PipelineResult:
    state: Dict[str, Any]
    ran_steps: List[str]


def new_state() -> Dict[str, Any]:
    return {"execution": {"current_step": None, "ran_steps": [], "errors": []}}


def run_pipeline(
    *,
    ctx: DeployCtx,
    state: Dict[str, Any],
    steps: Sequence[Step],
    start_at: Optional[str] = None,
    stop_after: Optional[str] = None,
) -> PipelineResult:
    """Run steps once, in order, optionally limited to a contiguous slice."""

    known = [s.step_id for s in steps]
    for wanted in (start_at, stop_after):
        if wanted is not None and wanted not in known:
            raise DeployError(f"Unknown step id {wanted!r} (expected one of: {', '.join(known)})")

    ran: List[str] = []
    started = start_at is None

    for step in steps:
        if not started:
            if step.step_id == start_at:
                started = True
            else:
                continue

        state.setdefault("execution", {})["current_step"] = step.step_id
        logger.info("Running step %s", step.step_id)
        state = step.run(ctx, state)
        ran.append(step.step_id)
        state.setdefault("execution", {}).setdefault("ran_steps", []).append(step.step_id)

        if stop_after is not None and step.step_id == stop_after:
            logger.info("Stopping after %s", stop_after)
            break

    state.setdefault("execution", {})["current_step"] = None
    return PipelineResult(state=state, ran_steps=ran)

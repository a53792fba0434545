from __future__ import annotations

import io
import json
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

import pytest
from rich.console import Console

from alist_deployer.config import DeployConfig
from alist_deployer.errors import CommandError
from alist_deployer.lib import compose as compose_mod
from alist_deployer.lib import docker as docker_mod
from alist_deployer.lib.command import CmdResult
from alist_deployer.pipeline import DeployCtx

Reply = Tuple[int, str, str]


def ps_json(*rows: Tuple[str, str, str]) -> str:
    """NDJSON rows of (service, state, health) as printed by recent compose releases."""
    return "\n".join(
        json.dumps({"Name": svc, "Service": svc, "State": state, "Health": health, "Status": state})
        for svc, state, health in rows
    )


class FakeRunner:
    """Stand-in for run_cmd: records argv and answers from scripted replies.

    Replies are keyed by a substring of the joined argv; the first key that
    matches wins. A list of replies is consumed in order (the last one repeats).
    """

    def __init__(self) -> None:
        self.calls: List[List[str]] = []
        self.inputs: List[Optional[str]] = []
        self.replies: List[Tuple[str, List[Reply]]] = []

    def on(self, needle: str, *replies: Reply) -> "FakeRunner":
        self.replies.append((needle, list(replies)))
        return self

    def joined(self) -> List[str]:
        return [" ".join(c) for c in self.calls]

    def called(self, needle: str) -> bool:
        return any(needle in j for j in self.joined())

    def __call__(
        self,
        argv: Sequence[str],
        *,
        check: bool = True,
        env=None,
        cwd=None,
        input_text: Optional[str] = None,
        dry_run: bool = False,
    ) -> CmdResult:
        argv_list = list(argv)
        self.calls.append(argv_list)
        self.inputs.append(input_text)
        if dry_run:
            return CmdResult(argv=argv_list, returncode=0, stdout="", stderr="")

        joined = " ".join(argv_list)
        code, out, err = 0, "", ""
        for needle, replies in self.replies:
            if needle in joined:
                code, out, err = replies.pop(0) if len(replies) > 1 else replies[0]
                break

        if check and code != 0:
            raise CommandError(argv_list, code, err)
        return CmdResult(argv=argv_list, returncode=code, stdout=out, stderr=err)


@pytest.fixture
def runner(monkeypatch) -> FakeRunner:
    fake = FakeRunner()
    monkeypatch.setattr(compose_mod, "run_cmd", fake)
    monkeypatch.setattr(docker_mod, "run_cmd", fake)
    monkeypatch.setattr(docker_mod.shutil, "which", lambda name: f"/usr/bin/{name}")
    return fake


@pytest.fixture
def project(tmp_path: Path) -> Path:
    (tmp_path / "docker-compose.yml").write_text(
        "services:\n  caddy:\n    image: caddy:2\n  alist:\n    image: xhofe/alist:latest\n",
        encoding="utf-8",
    )
    return tmp_path


class Sleeper:
    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: List[float] = []

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds

    def clock(self) -> float:
        return self.now


@pytest.fixture
def sleeper() -> Sleeper:
    return Sleeper()


@pytest.fixture
def make_ctx(project: Path, sleeper: Sleeper) -> Callable[..., DeployCtx]:
    def _make(*, dry_run: bool = False, **overrides) -> DeployCtx:
        cfg = DeployConfig(project_dir=overrides.pop("project_dir", project), **overrides)
        console = Console(file=io.StringIO(), width=120, color_system=None)
        return DeployCtx(cfg=cfg, dry_run=dry_run, console=console, sleep=sleeper.sleep, clock=sleeper.clock)

    return _make


def console_text(ctx: DeployCtx) -> str:
    return ctx.console.file.getvalue()


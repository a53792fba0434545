import pytest

from alist_deployer.errors import DeployError
from alist_deployer.pipeline import new_state, run_pipeline


class Recorder:
    def __init__(self, step_id, log, fail=False):
        self.step_id = step_id
        self.log = log
        self.fail = fail

    def run(self, ctx, state):
        self.log.append(self.step_id)
        if self.fail:
            raise DeployError(f"{self.step_id} broke")
        return state


def _steps(log, failing=None):
    return [Recorder(s, log, fail=(s == failing)) for s in ("00_a", "10_b", "20_c", "30_d")]


def test_runs_every_step_once_in_order(make_ctx):
    log = []
    result = run_pipeline(ctx=make_ctx(), state=new_state(), steps=_steps(log))
    assert log == ["00_a", "10_b", "20_c", "30_d"]
    assert result.ran_steps == log
    assert result.state["execution"]["current_step"] is None


def test_slice(make_ctx):
    log = []
    result = run_pipeline(ctx=make_ctx(), state=new_state(), steps=_steps(log), start_at="10_b", stop_after="20_c")
    assert result.ran_steps == ["10_b", "20_c"]


def test_failure_stops_the_run_and_keeps_current_step(make_ctx):
    log = []
    state = new_state()
    with pytest.raises(DeployError):
        run_pipeline(ctx=make_ctx(), state=state, steps=_steps(log, failing="10_b"))
    assert log == ["00_a", "10_b"]
    assert state["execution"]["current_step"] == "10_b"


def test_unknown_step_id_rejected(make_ctx):
    with pytest.raises(DeployError, match="Unknown step id"):
        run_pipeline(ctx=make_ctx(), state=new_state(), steps=_steps([]), stop_after="40_x")

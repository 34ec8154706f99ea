import pytest

from installdisk.pipeline import run_pipeline
from installdisk.state_store import new_state


class Recorder:
    def __init__(self, step_id, log, fail=False):
        self.step_id = step_id
        self.log = log
        self.fail = fail

    def run(self, state):
        self.log.append(self.step_id)
        if self.fail:
            raise RuntimeError(f"{self.step_id} failed")
        return state


def _steps(log, fail_at=None):
    return [Recorder(sid, log, fail=(sid == fail_at)) for sid in ("10_a", "20_b", "30_c")]


def test_runs_all_steps_in_order():
    log = []
    result = run_pipeline(state=new_state("init", {}), steps=_steps(log))

    assert log == ["10_a", "20_b", "30_c"]
    assert result.ran_steps == log
    assert result.state["execution"]["completed_steps"] == log
    assert result.state["execution"]["current_step"] is None


def test_skips_completed_steps_unless_forced():
    log = []
    state = new_state("init", {})
    state["execution"]["completed_steps"] = ["10_a"]

    result = run_pipeline(state=state, steps=_steps(log))
    assert log == ["20_b", "30_c"]
    assert result.skipped_steps == ["10_a"]

    log.clear()
    run_pipeline(state=state, steps=_steps(log), force=True)
    assert log == ["10_a", "20_b", "30_c"]


def test_start_at_and_stop_after():
    log = []
    run_pipeline(state=new_state("init", {}), steps=_steps(log), start_at="20_b", stop_after="20_b")
    assert log == ["20_b"]


def test_unknown_step_bounds():
    with pytest.raises(ValueError):
        run_pipeline(state=new_state("init", {}), steps=_steps([]), start_at="99_z")
    with pytest.raises(ValueError):
        run_pipeline(state=new_state("init", {}), steps=_steps([]), stop_after="99_z")


def test_failure_aborts_remaining_steps():
    log = []
    state = new_state("init", {})

    with pytest.raises(RuntimeError):
        run_pipeline(state=state, steps=_steps(log, fail_at="20_b"))

    assert log == ["10_a", "20_b"]
    assert state["execution"]["completed_steps"] == ["10_a"]
    assert state["execution"]["current_step"] == "20_b"

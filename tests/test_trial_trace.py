"""
Tests for trial_trace.
"""

from __future__ import annotations

import json
from pathlib import Path

from conftest import make_config, make_teams
from scheduler import MatchScheduler
from utils.trial_trace import trace_enabled, trace_trial


def test_trace_no_env_does_nothing(monkeypatch):
    monkeypatch.delenv("SCHEDULER_TRACE_PATH", raising=False)

    assert not trace_enabled()
    trace_trial("trial_scored", "loc", {"a": 1})


def test_trace_writes_jsonl(monkeypatch, tmp_path: Path):
    path = tmp_path / "trace.jsonl"
    monkeypatch.setenv("SCHEDULER_TRACE_PATH", str(path))

    trace_trial("trial_scored", "scheduler.py:_run_trial", {"seed": 3}, request_id="dinner-1")

    payload = json.loads(path.read_text(encoding="utf-8").strip())
    assert payload["event"] == "trial_scored"
    assert payload["location"] == "scheduler.py:_run_trial"
    assert payload["data"] == {"seed": 3}
    assert payload["requestId"] == "dinner-1"
    assert "thread" in payload


def test_trace_swallows_write_errors(monkeypatch, tmp_path: Path):
    monkeypatch.setenv("SCHEDULER_TRACE_PATH", str(tmp_path / "trace.jsonl"))

    def _raise(*_args, **_kwargs):
        raise OSError("nope")

    monkeypatch.setattr("builtins.open", _raise)

    trace_trial("trial_scored", "loc")


def test_scheduler_traces_every_trial(monkeypatch, tmp_path: Path):
    path = tmp_path / "trace.jsonl"
    monkeypatch.setenv("SCHEDULER_TRACE_PATH", str(path))

    plan = MatchScheduler(max_workers=2).schedule(make_config(3, 3), make_teams(6))

    lines = [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]
    assert len(lines) == plan.attempts
    assert {line["data"]["seed"] for line in lines} >= {plan.seed}

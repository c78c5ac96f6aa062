import glob
import io
import json
import os

import pytest

from playtest import report
from playtest.report import default_log_dir, load_runs, summarize
from playtest.walkthrough import (
    WalkthroughError,
    load_walkthrough,
    parse_step,
    run_walkthrough,
    save_result,
)
from room_logic.config import PROJECT_ROOT
from room_logic.logger import Logger

SHIPPED = sorted(glob.glob(os.path.join(PROJECT_ROOT, "walkthroughs", "*.yaml")))


def quiet_log() -> Logger:
    return Logger(None, "test", "walkthrough", stream=io.StringIO())


def test_parse_steps():
    assert parse_step("start") == ("start", None)
    assert parse_step({"search": "desk"}) == ("search", "desk")
    assert parse_step({"code": 1847}) == ("code", "1847")
    assert parse_step({"tick": 3}) == ("tick", 3)
    assert parse_step("wait_out") == ("wait_out", None)


@pytest.mark.parametrize("raw", ["jump", {"fly": 1}, {"wait_out": False}, {"wait_out": True}, {"tick": -1}, {"tick": "3"}, {"a": 1, "b": 2}, 7])
def test_parse_step_rejects(raw):
    with pytest.raises(WalkthroughError):
        parse_step(raw)


def test_load_rejects_unknown_outcome(tmp_path):
    path = tmp_path / "w.yaml"
    path.write_text("expect: escaped\nsteps: [start]\n")
    with pytest.raises(WalkthroughError, match="escaped"):
        load_walkthrough(str(path))


def test_name_defaults_to_file_name(tmp_path):
    path = tmp_path / "quick.yaml"
    path.write_text("steps: [start]\n")
    assert load_walkthrough(str(path))["name"] == "quick"


@pytest.mark.parametrize("path", SHIPPED, ids=os.path.basename)
def test_shipped_walkthroughs_pass(path):
    result = run_walkthrough(load_walkthrough(path), quiet_log())
    assert result["passed"], result


def test_full_escape_result():
    script = load_walkthrough(os.path.join(PROJECT_ROOT, "walkthroughs", "full_escape.yaml"))
    result = run_walkthrough(script, quiet_log())
    assert result["phase"] == "won"
    assert result["room_index"] == 2
    assert result["time_remaining"] == 1
    titles = [n["title"] for n in result["notifications"]]
    assert titles.count("Room Escaped!") == 2
    assert "Missing Items" in titles


def test_wait_out_and_failed_expectation():
    script = {"name": "idle", "expect": "won", "steps": [("start", None), ("wait_out", None)]}
    result = run_walkthrough(script, quiet_log())
    assert result["phase"] == "lost"
    assert result["time_remaining"] == 0
    assert not result["passed"]


def test_unknown_hotspot_is_logged():
    stream = io.StringIO()
    script = {"name": "typo", "expect": None, "steps": [("start", None), ("search", "sofa")]}
    result = run_walkthrough(script, Logger(None, "typo", "walkthrough", stream=stream))
    assert result["passed"]
    assert "no hotspot 'sofa' here" in stream.getvalue()


def test_results_roundtrip_through_report(tmp_path):
    for name, expect in (("a", "won"), ("b", None)):
        script = {"name": name, "expect": expect, "steps": [("start", None), ("tick", 2)]}
        save_result(run_walkthrough(script, quiet_log()), str(tmp_path))
    (tmp_path / "junk.json").write_text("{not json")
    (tmp_path / "other.json").write_text(json.dumps({"model": "x"}))

    runs = load_runs(str(tmp_path))
    assert [r["name"] for r in runs] == ["a", "b"]
    summary = summarize(runs)
    assert summary == {
        "runs": 2,
        "passed": 1,
        "failed": 1,
        "by_phase": {"playing": 2},
        "failures": ["a"],
    }


def test_report_reads_configured_log_dir(tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("ESCAPE_ROOM_CONFIG", str(tmp_path / "nope.yaml"))
    monkeypatch.setenv("ESCAPE_ROOM_LOG_DIR", str(tmp_path / "results"))
    assert default_log_dir() == str(tmp_path / "results")

    script = {"name": "moved", "expect": "playing", "steps": [("start", None)]}
    save_result(run_walkthrough(script, quiet_log()), str(tmp_path / "results"))
    monkeypatch.setattr("sys.argv", ["report.py"])
    report.main()
    out = capsys.readouterr().out
    assert "moved" in out
    assert "Passed: 1" in out

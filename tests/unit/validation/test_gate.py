"""Tests for the end-to-end validation gate."""

from __future__ import annotations

import pytest

from p4unity.errors import EmptyReportError, RemoteLookupError, ReportShapeError
from p4unity.validation.gate import has_bypass, run_gate
from tests.unit.report_utils import ASSETS, BYPASS, OracleStub, make_config, make_report


def test_scenario_pair_added_together(logger) -> None:
    raw = make_report([f"{ASSETS}/a.png#1 add", f"{ASSETS}/a.png.meta#1 add"])

    verdict = run_gate(raw, make_config(), OracleStub(), logger)

    assert verdict.allowed
    assert verdict.violations == []
    assert not verdict.bypassed


def test_scenario_asset_without_meta(logger) -> None:
    raw = make_report([f"{ASSETS}/a.png#1 add"])

    verdict = run_gate(raw, make_config(), OracleStub(), logger)

    assert not verdict.allowed
    assert len(verdict.messages) == 1
    assert f"{ASSETS}/a.png" in verdict.messages[0]


def test_scenario_delete_leaves_meta(logger) -> None:
    raw = make_report([f"{ASSETS}/b.png#2 delete"])

    verdict = run_gate(raw, make_config(), OracleStub(existing={f"{ASSETS}/b.png.meta"}), logger)

    assert not verdict.allowed
    assert [v.type for v in verdict.violations] == ["orphaned_meta"]
    assert f"{ASSETS}/b.png" in verdict.messages[0]


def test_scenario_bypass_keyphrase(logger) -> None:
    raw = make_report([f"{ASSETS}/a.png#1 add"], description=["Emergency fix", f"{BYPASS} - art sync"])
    oracle = OracleStub()

    verdict = run_gate(raw, make_config(), oracle, logger)

    assert verdict.allowed
    assert verdict.bypassed
    assert verdict.violations == []
    assert oracle.calls == []


def test_scenario_tilde_directory_ignored(logger) -> None:
    raw = make_report([f"{ASSETS}/Docs~/a.png#1 add", f"{ASSETS}/b.png#1 add", f"{ASSETS}/b.png.meta#1 add"])
    oracle = OracleStub()

    verdict = run_gate(raw, make_config(), oracle, logger)

    assert verdict.allowed
    assert oracle.calls == []


def test_case_insensitive_pairing(logger) -> None:
    raw = make_report([f"{ASSETS}/Foo.PNG#1 add", f"{ASSETS}/foo.png.meta#1 add"])
    assert run_gate(raw, make_config(), OracleStub(), logger).allowed


def test_bypass_not_matched_on_summary_line(logger) -> None:
    raw = make_report([f"{ASSETS}/a.png#1 add"]).replace("*pending*", f"*pending* {BYPASS}")
    verdict = run_gate(raw, make_config(), OracleStub(), logger)
    assert not verdict.bypassed
    assert not verdict.allowed


def test_bypass_wins_over_empty_record_block(logger) -> None:
    raw = make_report([], description=[BYPASS])
    assert run_gate(raw, make_config(), OracleStub(), logger).bypassed


def test_empty_bypass_keyphrase_never_bypasses() -> None:
    assert not has_bypass(["Change 1", "anything"], "")
    assert has_bypass(["Change 1", "please p4unity-bypass"], BYPASS)
    assert not has_bypass([f"Change 1 {BYPASS}"], BYPASS)


def test_empty_header_is_fatal(logger) -> None:
    with pytest.raises(EmptyReportError, match="empty"):
        run_gate("info1: //Depot/Game/Assets/a.png#1 add\r\n", make_config(), OracleStub(), logger)


def test_empty_record_block_is_fatal(logger) -> None:
    with pytest.raises(EmptyReportError, match="no file records"):
        run_gate(make_report([]), make_config(), OracleStub(), logger)


def test_malformed_record_is_fatal(logger) -> None:
    raw = make_report([f"{ASSETS}/a.png#1 add", "something unexpected"])
    with pytest.raises(ReportShapeError):
        run_gate(raw, make_config(), OracleStub(), logger)


def test_oracle_failure_is_fatal(logger) -> None:
    def failing(depot_path: str) -> bool:
        raise RemoteLookupError(depot_path, "timeout")

    with pytest.raises(RemoteLookupError):
        run_gate(make_report([f"{ASSETS}/a.png#1 add"]), make_config(), failing, logger)


def test_unknown_operations_pass_through(logger) -> None:
    raw = make_report([f"{ASSETS}/a.png#3 integrate", f"{ASSETS}/c.png#2 edit"])
    oracle = OracleStub()

    verdict = run_gate(raw, make_config(), oracle, logger)

    assert verdict.allowed
    assert oracle.calls == []


def test_files_outside_whitelist_are_not_checked(logger) -> None:
    raw = make_report(["//Depot/Other/Assets/a.png#1 add"])
    assert run_gate(raw, make_config(), OracleStub(), logger).allowed
    assert run_gate(make_report([f"{ASSETS}/a.png#1 add"]), make_config(path_whitelist=()), OracleStub(), logger).allowed


def test_violations_from_both_passes(logger) -> None:
    raw = make_report([f"{ASSETS}/a.png#1 add", f"{ASSETS}/b.png#2 delete"])
    oracle = OracleStub(existing={f"{ASSETS}/b.png.meta"})

    verdict = run_gate(raw, make_config(), oracle, logger)

    assert [v.type for v in verdict.violations] == ["missing_meta", "orphaned_meta"]


def test_same_report_gives_same_verdict(logger) -> None:
    raw = make_report([f"{ASSETS}/b.png#1 add", f"{ASSETS}/a.png#1 add", f"{ASSETS}/c.png#2 delete"])
    config = make_config()
    oracle = OracleStub(existing={f"{ASSETS}/c.png.meta"})

    first = run_gate(raw, config, oracle, logger)
    second = run_gate(raw, config, oracle, logger)

    assert first == second

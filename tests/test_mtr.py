from datetime import datetime, timedelta

import pytest

from mtrprobe.mtr import (
    MtrOptions,
    MtrResult,
    aggregate,
    batch_detect,
    format_report,
    mtr,
    run_mtr,
)
from mtrprobe.types import IcmpHop, IcmpResp


@pytest.fixture(autouse=True)
def _empty_home(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("USERPROFILE", str(tmp_path))


def _resp(addr, ms):
    return IcmpResp(success=True, addr=addr, elapsed=timedelta(milliseconds=ms))


def test_options_defaults_replace_zero():
    options = MtrOptions()
    assert options.max_hops == 30
    assert options.timeout_ms == 800
    assert options.packet_size == 56
    assert options.snt_size == 5


def test_options_keep_given_values():
    options = MtrOptions(max_hops=0, snt_size=7)
    assert options.snt_size == 7
    assert options.max_hops == 30


def test_aggregate_statistics():
    options = MtrOptions(max_hops=4, snt_size=2)
    rows = [
        [None, _resp("10.0.0.1", 10), None, None, None],
        [None, _resp("10.0.0.1", 30), _resp("10.0.0.2", 5), None, None],
    ]
    result = aggregate(rows, "10.0.0.9", options)
    assert result.dest_address == "10.0.0.9"
    assert [h.ttl for h in result.hops] == [1, 2, 3]

    first = result.hops[0]
    assert first.success
    assert first.address == "10.0.0.1"
    assert first.best_time == timedelta(milliseconds=10)
    assert first.wrst_time == timedelta(milliseconds=30)
    assert first.last_time == timedelta(milliseconds=30)
    assert first.best_time <= first.avg_time <= first.wrst_time
    assert first.loss == 0.0
    assert first.snt == 2

    second = result.hops[1]
    assert second.host == "10.0.0.2"
    assert 0 < second.loss < 100

    third = result.hops[2]
    assert not third.success
    assert third.host == "???"
    assert third.loss == 100.0


def test_aggregate_stops_at_destination():
    options = MtrOptions(max_hops=4, snt_size=1)
    rows = [[None, _resp("10.0.0.1", 1), _resp("10.0.0.9", 2), _resp("10.0.0.9", 3), None]]
    result = aggregate(rows, "10.0.0.9", options)
    assert len(result.hops) == 2
    assert result.hops[-1].host == "10.0.0.9"


def test_aggregate_without_rounds_has_no_hops():
    assert aggregate([], "10.0.0.9", MtrOptions(max_hops=4, snt_size=1)).hops == []


def test_report_without_hops():
    report = format_report(MtrResult(dest_address="1.2.3.4"), "1.2.3.4", datetime(2020, 1, 2, 3, 4, 5))
    assert report.startswith("Start: 2020-01-02 03:04:05, DestAddr: 1.2.3.4\n\n")
    assert report.endswith("mtr failed. Expected at least one hop\n")


def test_report_rows():
    hops = [
        IcmpHop(success=True, address="10.0.0.1", host="10.0.0.1", ttl=1, snt=3),
        IcmpHop(success=False, address="???", host="???", ttl=2, snt=3, loss=100.0),
        IcmpHop(success=True, address="10.0.0.3", host="10.0.0.3", ttl=3, snt=3),
        IcmpHop(success=False, address="???", host="???", ttl=4, snt=3, loss=100.0),
    ]
    report = format_report(MtrResult("10.0.0.9", hops), "10.0.0.9", datetime(2020, 1, 2, 3, 4, 5))
    lines = report.splitlines()
    assert "HOST" in lines[2] and "Loss%" in lines[2]
    assert lines[3].split()[:2] == ["1", "10.0.0.1"]
    assert lines[3].rstrip().endswith(":")
    assert lines[4].split()[:2] == ["2", "???"]
    assert "null" in lines[4]
    assert lines[5].split()[:2] == ["3", "10.0.0.3"]
    assert lines[-1].split() == ["4", "???"]


def test_report_drops_pending_failures_before_trailing_failure():
    hops = [
        IcmpHop(success=True, address="10.0.0.1", host="10.0.0.1", ttl=1, snt=1),
        IcmpHop(success=False, address="???", host="???", ttl=2, snt=1, loss=100.0),
        IcmpHop(success=False, address="???", host="???", ttl=3, snt=1, loss=100.0),
    ]
    report = format_report(MtrResult("10.0.0.9", hops), "10.0.0.9")
    assert "null" not in report
    assert report.splitlines()[-1].split() == ["2", "???"]


def test_batch_detect_invalid_address_gives_empty_rounds():
    options = MtrOptions(max_hops=4, snt_size=2, timeout_ms=10)
    rounds = batch_detect("bogus", options)
    assert len(rounds) == 2
    assert all(len(row) == 5 for row in rounds)
    assert all(entry is None for row in rounds for entry in row)


def test_run_mtr_invalid_address_reports_all_lost():
    result = run_mtr("bogus", MtrOptions(max_hops=4, snt_size=1, timeout_ms=10))
    assert [h.ttl for h in result.hops] == [1, 2, 3]
    assert all(not h.success and h.loss == 100.0 for h in result.hops)


def test_mtr_text_for_unreachable_target():
    report = mtr("bogus", 4, 1, 10)
    assert "DestAddr: bogus" in report
    assert "HOST" in report
    assert report.splitlines()[-1].split() == ["1", "???"]
from datetime import timedelta

from mtrprobe.types import IcmpHop, IcmpResp


def test_icmp_resp_defaults():
    resp = IcmpResp()
    assert resp.success is False
    assert resp.addr == ""
    assert resp.elapsed == timedelta(0)


def test_icmp_hop_defaults_and_fields():
    hop = IcmpHop(ttl=3, address="10.0.0.1", loss=50.0)
    assert hop.ttl == 3
    assert hop.address == "10.0.0.1"
    assert hop.loss == 50.0
    assert hop.best_time == timedelta(0)
    assert hop.snt == 0


def test_default_durations_are_independent():
    a = IcmpHop()
    b = IcmpHop()
    a.avg_time += timedelta(milliseconds=5)
    assert b.avg_time == timedelta(0)
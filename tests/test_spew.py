from mtrprobe import spew


def test_error_joins_with_spaces(capsys):
    spew.error("a", 1)
    assert capsys.readouterr().out == "a 1\n"


def test_errorf_formats_and_terminates_line(capsys):
    spew.errorf("addr %s failed", "1.2.3.4")
    assert capsys.readouterr().out == "addr 1.2.3.4 failed\n"


def test_levels_print_text(capsys):
    spew.warn("w")
    spew.info("i")
    spew.debug("d")
    spew.panic("p", "q")
    assert capsys.readouterr().out == "w\ni\nd\np q\n"


def test_formatted_levels(capsys):
    spew.warnf("%d-%d", 1, 2)
    spew.infof("x")
    spew.debugf("%s", "y")
    assert capsys.readouterr().out == "1-2\nx\ny\n"


def test_dump_reports_caller(capsys):
    spew.dump({"k": 1})
    out = capsys.readouterr().out
    assert "funcname: test_dump_reports_caller" in out
    assert "tests/test_spew.py" in out
    assert "{'k': 1}" in out


def test_highlight_silent_without_tty(capsys):
    spew.begin_highlight()
    spew.end_highlight()
    assert capsys.readouterr().out == ""
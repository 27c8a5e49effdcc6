import io
import json
import logging

import pytest
from rich.console import Console

from pbokit.logging import configure_logging, get_logger
from pbokit.reporting import (
    JsonLinesReporter,
    PlainReporter,
    RichReporter,
    TaskStatus,
    set_reporter,
    set_verbosity,
    task,
)


def test_plain_reporter_completion_line():
    buf = io.StringIO()
    rep = PlainReporter(buf, use_color=False)
    rep.start_task("t", "Entry payloads", total=2)
    rep.advance("t", current_item="a.txt")
    rep.advance("t", current_item="b.txt")
    rep.end_task("t", entries=2, bytes=10)
    out = buf.getvalue()
    # Per-item lines require -v.
    assert "a.txt" not in out
    assert "✔ Entry payloads 2/2" in out
    assert "[entries=2 bytes=10]" in out


def test_plain_reporter_item_lines_when_verbose():
    buf = io.StringIO()
    rep = PlainReporter(buf, use_color=False)
    set_verbosity(1)
    rep.start_task("t", "Extract entries", total=1)
    rep.advance("t", current_item="dir\\a.txt")
    assert "dir\\a.txt (1/1)" in buf.getvalue()


def test_task_context_marks_failure():
    buf = io.StringIO()
    set_reporter(JsonLinesReporter(buf))
    with pytest.raises(RuntimeError):
        with task("scan", "Scan"):
            raise RuntimeError("boom")
    events = [json.loads(line) for line in buf.getvalue().splitlines()]
    assert events[-1]["event"] == "task_end"
    assert events[-1]["status"] == TaskStatus.FAILED.name.lower()


def test_json_summary_parsing():
    buf = io.StringIO()
    rep = JsonLinesReporter(buf)
    rep.status("Unpack summary: file=x.pbo entries=3", extra=1)
    rep.status("not a summary")
    events = [json.loads(line) for line in buf.getvalue().splitlines()]
    assert events[0]["event"] == "summary"
    assert events[0]["summary_type"] == "unpack"
    assert events[0]["entries"] == "3" and events[0]["extra"] == 1
    assert [e["event"] for e in events[1:]] == ["status", "status"]


def test_rich_reporter_prints_to_console(monkeypatch):
    monkeypatch.setenv("PBOKIT_PROGRESS_TRANSIENT", "1")
    out = io.StringIO()
    rep = RichReporter(Console(file=out, force_terminal=False, width=100))
    rep.start_task("w", "Entry payloads", total=1)
    rep.advance("w")
    rep.end_task("w", entries=1)
    rep.warning("odd [name]")
    text = out.getvalue()
    assert "Entry payloads 1/1" in text
    assert "odd [name]" in text
    assert rep.progress is None


def test_logging_routes_to_reporter_by_verbosity():
    buf = io.StringIO()
    set_reporter(PlainReporter(buf, use_color=False))
    configure_logging(0)
    log = get_logger()
    log.info("hidden")
    log.warning("shown")
    assert "hidden" not in buf.getvalue()
    assert "WARN: shown" in buf.getvalue()

    configure_logging(2)
    set_verbosity(1)
    log.debug("decode detail")
    log.info("summary")
    assert "VERB1: decode detail" in buf.getvalue()
    assert "INFO: summary" in buf.getvalue()
    assert log.level == logging.DEBUG
    assert len(log.handlers) == 1
    configure_logging(0)

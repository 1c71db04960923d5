import logging

from zavala.infra.logging import format_event, log_event


def test_format_event_quotes_values_with_spaces():
    line = format_event("admitted", user_id="u1", note="two words", missing=None, ok=True)
    assert line.startswith("event=admitted uptime_s=")
    assert "user_id=u1" in line
    assert 'note="two words"' in line
    assert "missing=-" in line
    assert "ok=1" in line


def test_log_event_emits_on_package_logger(caplog):
    with caplog.at_level(logging.INFO, logger="zavala"):
        log_event("user_reset", user_id="u9")
    assert any("event=user_reset" in r.message and "user_id=u9" in r.message for r in caplog.records)

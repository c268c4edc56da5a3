import datetime
import pytest

from ps2_psp_converter import crash_reporter
from ps2_psp_converter.crash_reporter import CRASH_REPORT_NAME, build_crash_report, report_fatal_error
from ps2_psp_converter.exceptions import EmptyResponseError

def _raised(error):
    """Returns `error` after raising it, so it carries a traceback."""
    try:
        raise error
    except Exception as e:
        return e

# --- build_crash_report ---

def test_report_contains_name_message_and_stack():
    error = _raised(EmptyResponseError("Perplexity did not return a conversion plan."))
    stamp = datetime.datetime(2026, 1, 2, 3, 4, 5, tzinfo=datetime.timezone.utc)

    report = build_crash_report(error, timestamp=stamp)

    assert "Timestamp: 2026-01-02T03:04:05+00:00" in report
    assert "Name: EmptyResponseError" in report
    assert "Message: Perplexity did not return a conversion plan." in report
    assert "Traceback (most recent call last)" in report

def test_report_without_traceback_uses_placeholder():
    report = build_crash_report(RuntimeError("never raised"))

    assert report.endswith("Stack:\n<no stack available>")

# --- report_fatal_error ---

def test_writes_report_into_given_folder(tmp_path, capsys):
    desktop = tmp_path / "Desktop"
    error = _raised(RuntimeError("disk on fire"))

    path = report_fatal_error(error, report_dir=desktop)

    assert path == desktop / CRASH_REPORT_NAME
    content = path.read_text(encoding="utf-8")
    assert "Message: disk on fire" in content
    assert "Timestamp: " in content
    assert str(path) in capsys.readouterr().err

def test_defaults_to_user_desktop(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))

    path = report_fatal_error(RuntimeError("boom"))

    assert path == tmp_path / "Desktop" / CRASH_REPORT_NAME
    assert path.exists()

def test_overwrites_previous_report(tmp_path):
    report_fatal_error(RuntimeError("first"), report_dir=tmp_path)
    path = report_fatal_error(RuntimeError("second"), report_dir=tmp_path)

    content = path.read_text(encoding="utf-8")
    assert "second" in content
    assert "first" not in content

def test_write_failure_falls_back_to_stderr(tmp_path, capsys):
    not_a_dir = tmp_path / "Desktop"
    not_a_dir.write_text("I am a file", encoding="utf-8")

    path = report_fatal_error(RuntimeError("original problem"), report_dir=not_a_dir)

    assert path is None
    err = capsys.readouterr().err
    assert "could not be written" in err
    assert "original problem" in err
    assert "Report write error" in err

def test_fallback_never_raises_even_if_stderr_breaks(tmp_path, monkeypatch):
    class BrokenStream:
        def write(self, _):
            raise OSError("stderr closed")
        def flush(self):
            pass

    blocker = tmp_path / "blocker"
    blocker.write_text("x", encoding="utf-8")
    monkeypatch.setattr(crash_reporter.sys, "stderr", BrokenStream())

    assert report_fatal_error(RuntimeError("boom"), report_dir=blocker) is None

def test_success_path_survives_broken_stderr(tmp_path, monkeypatch):
    class BrokenStream:
        def write(self, _):
            raise OSError("stderr closed")
        def flush(self):
            pass

    monkeypatch.setattr(crash_reporter.sys, "stderr", BrokenStream())

    path = report_fatal_error(RuntimeError("boom"), report_dir=tmp_path)

    assert path == tmp_path / CRASH_REPORT_NAME
    assert "Message: boom" in path.read_text(encoding="utf-8")

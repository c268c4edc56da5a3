"""
Fatal error reporting.

The only place where an error becomes user-visible output: a crash
report file on the user's desktop plus a console message. Writing the
report must never raise, so a failed write falls back to stderr.
"""
import datetime
import logging
import sys
import traceback
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)

CRASH_REPORT_NAME = "ps2-to-psp-converter-crash-report.txt"
NO_STACK = "<no stack available>"


def default_report_dir() -> Path:
    return Path.home() / "Desktop"


def build_crash_report(error: BaseException, timestamp: Optional[datetime.datetime] = None) -> str:
    """Formats the crash report text for `error`."""
    timestamp = timestamp or datetime.datetime.now(datetime.timezone.utc)
    if error.__traceback__ is not None:
        stack = "".join(traceback.format_exception(type(error), error, error.__traceback__)).rstrip()
    else:
        stack = NO_STACK
    return "\n".join([
        "PS2 -> PSP Converter Crash Report",
        f"Timestamp: {timestamp.isoformat()}",
        "",
        f"Name: {type(error).__name__}",
        f"Message: {error}",
        "",
        f"Stack:\n{stack}",
    ])


def report_fatal_error(error: BaseException,
                       report_dir: Optional[Union[str, Path]] = None) -> Optional[Path]:
    """
    Writes the crash report for `error` and tells the user where it is.

    Args:
        error: The error that ended the run.
        report_dir: Folder for the report; defaults to ~/Desktop, created if absent.

    Returns:
        The report path, or None if it could not be written.
    """
    try:
        report_dir = Path(report_dir) if report_dir is not None else default_report_dir()
        report_path = report_dir / CRASH_REPORT_NAME
        content = build_crash_report(error)
        report_dir.mkdir(parents=True, exist_ok=True)
        with open(report_path, 'w', encoding='utf-8') as f:
            f.write(content)
    except Exception as write_error:
        try:
            print("\nA fatal error occurred and the crash report could not be written.", file=sys.stderr)
            print(f"Original error: {type(error).__name__}: {error}", file=sys.stderr)
            print(f"Report write error: {type(write_error).__name__}: {write_error}", file=sys.stderr)
        except Exception:
            # stderr itself is unusable; nothing left to report to
            pass
        return None

    try:
        logger.critical(f"Fatal error: {type(error).__name__}: {error}")
        print(f"\nA fatal error occurred. A crash report was written to: {report_path}", file=sys.stderr)
    except Exception:
        # The report is on disk; a broken stderr must not undo that
        pass
    return report_path

import pytest
from unittest.mock import AsyncMock

from ps2_psp_converter import main
from ps2_psp_converter.crash_reporter import CRASH_REPORT_NAME
from ps2_psp_converter.exceptions import ConnectivityError
from ps2_psp_converter.pipeline import PipelineOutcome, PipelineState

PLAN = "Plan text from the service."

# --- Test Fixtures ---

@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch, mocker):
    """Points the crash reporter's desktop and the working directory into tmp_path."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    mocker.patch('ps2_psp_converter.config_loader.load_dotenv')
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("PERPLEXITY_API_KEY", raising=False)
    return home

@pytest.fixture(autouse=True)
def mock_logging(mocker):
    """Keeps setup_logging from replacing pytest's log handlers."""
    return mocker.patch('ps2_psp_converter.main.setup_logging')

@pytest.fixture
def mock_remote(mocker):
    mock_ready = mocker.patch('ps2_psp_converter.pipeline.check_ready', new_callable=AsyncMock)
    mock_plan = mocker.patch('ps2_psp_converter.pipeline.request_plan', new_callable=AsyncMock)
    mock_ready.return_value = True
    mock_plan.return_value = PLAN
    return mock_ready, mock_plan

@pytest.fixture
def source_folder(tmp_path):
    root = tmp_path / "game"
    root.mkdir()
    (root / "SYSTEM.CNF").write_text("BOOT2", encoding="utf-8")
    return root

def _crash_report(home):
    return home / "Desktop" / CRASH_REPORT_NAME

# --- Argument parsing ---

def test_parser_defaults():
    args = main.build_parser().parse_args(["--source-folder", "game"])

    assert args.source_folder == "game"
    assert args.output is None
    assert args.api_key is None
    assert args.config is None

def test_parser_accepts_ps2_folder_alias():
    args = main.build_parser().parse_args(["--ps2-folder", "game", "--output", "out", "--api-key", "k"])

    assert (args.source_folder, args.output, args.api_key) == ("game", "out", "k")

def test_parser_requires_source_folder():
    with pytest.raises(SystemExit):
        main.build_parser().parse_args([])

# --- run_guarded ---

def test_run_guarded_success_returns_zero(mocker):
    report = mocker.patch('ps2_psp_converter.main.report_fatal_error')

    assert main.run_guarded(lambda: PipelineOutcome(state=PipelineState.DONE)) == 0
    report.assert_not_called()

def test_run_guarded_reports_failed_outcome_once(mocker):
    report = mocker.patch('ps2_psp_converter.main.report_fatal_error')
    error = ConnectivityError("unreachable")

    code = main.run_guarded(lambda: PipelineOutcome(state=PipelineState.FAILED, error=error))

    assert code == 1
    report.assert_called_once_with(error)

def test_run_guarded_reports_uncaught_exception(mocker):
    report = mocker.patch('ps2_psp_converter.main.report_fatal_error')
    error = RuntimeError("unexpected")

    def _explode():
        raise error

    assert main.run_guarded(_explode) == 1
    report.assert_called_once_with(error)

# --- End to end through main() ---

def test_main_success(source_folder, tmp_path, mock_remote, isolated_home):
    out = tmp_path / "psp"

    code = main.main(["--source-folder", str(source_folder), "--output", str(out), "--api-key", "k"])

    assert code == 0
    assert (out / "conversion-summary.txt").read_text(encoding="utf-8") == PLAN
    assert not _crash_report(isolated_home).exists()

def test_main_uses_env_key_and_default_output(source_folder, tmp_path, mock_remote, monkeypatch):
    monkeypatch.setenv("PERPLEXITY_API_KEY", "env-key")
    mock_ready, _ = mock_remote

    code = main.main(["--source-folder", str(source_folder)])

    assert code == 0
    assert mock_ready.await_args.args[0] == "env-key"
    assert (tmp_path / "output" / "README.psp.md").exists()

def test_main_missing_source_reports_and_exits_1(tmp_path, mock_remote, isolated_home):
    mock_ready, mock_plan = mock_remote
    out = tmp_path / "psp"

    code = main.main(["--source-folder", str(tmp_path / "missing"), "--output", str(out), "--api-key", "k"])

    assert code == 1
    mock_ready.assert_not_awaited()
    mock_plan.assert_not_awaited()
    assert not out.exists()
    report = _crash_report(isolated_home).read_text(encoding="utf-8")
    assert "Name: SourceFolderError" in report

def test_main_missing_key_reports(source_folder, mock_remote, isolated_home):
    code = main.main(["--source-folder", str(source_folder)])

    assert code == 1
    assert "API key is required" in _crash_report(isolated_home).read_text(encoding="utf-8")

def test_main_remote_failure_writes_single_report(source_folder, tmp_path, mock_remote, isolated_home):
    _, mock_plan = mock_remote
    mock_plan.side_effect = ConnectivityError("Failed to reach Perplexity API.")

    code = main.main(["--source-folder", str(source_folder), "--output", str(tmp_path / "psp"), "--api-key", "k"])

    assert code == 1
    reports = list((isolated_home / "Desktop").iterdir())
    assert reports == [_crash_report(isolated_home)]
    content = reports[0].read_text(encoding="utf-8")
    assert "Message: Failed to reach Perplexity API." in content
    assert "Timestamp: " in content

def test_main_bad_config_file_is_reported(source_folder, tmp_path, isolated_home):
    code = main.main(["--source-folder", str(source_folder), "--config", str(tmp_path / "nope.yaml")])

    assert code == 1
    assert "Name: ConfigNotFoundError" in _crash_report(isolated_home).read_text(encoding="utf-8")

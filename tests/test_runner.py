from types import SimpleNamespace

from switchbot_mcp_bridge import runner
from switchbot_mcp_bridge.config import Settings
from switchbot_mcp_bridge.runner import ExecutionResult, format_result, run_switchbot_command


def test_build_command_line_uses_argument_vector():
    settings = Settings(interpreter="node", cli_path="/opt/bot-cmd.mjs")
    argv = runner.build_command_line("press", ["aa:bb:cc:dd:ee:ff"], settings)
    assert argv == ["node", "/opt/bot-cmd.mjs", "press", "aa:bb:cc:dd:ee:ff"]


def test_success_returns_trimmed_stdout(cli_settings):
    result = run_switchbot_command("scan", [], settings=cli_settings)
    assert result.success
    assert result.output == "ran scan"
    assert result.exit_code == 0


def test_arguments_are_not_shell_interpreted(cli_settings):
    result = run_switchbot_command("press", ["aa:bb; echo injected"], settings=cli_settings)
    assert result.output == "ran press aa:bb; echo injected"


def test_nonzero_exit_reports_stderr_and_partial_output(cli_settings):
    result = run_switchbot_command("fail", [], settings=cli_settings)
    assert not result.success
    assert result.error == "timeout"
    assert result.output == "partial output"
    assert result.exit_code == 1
    assert format_result(result) == "Error: timeout"


def test_nonzero_exit_without_stderr(cli_settings):
    result = run_switchbot_command("silent-fail", [], settings=cli_settings)
    assert not result.success
    assert result.error == "Command exited with status 3"


def test_missing_executable_is_a_failed_result():
    settings = Settings(interpreter="/nonexistent/switchbot-node", cli_path="bot-cmd.mjs")
    result = run_switchbot_command("scan", [], settings=settings)
    assert not result.success
    assert result.exit_code is None
    assert result.error
    assert format_result(result).startswith("Error: ")


def test_timeout_is_reported(cli_settings):
    settings = cli_settings.model_copy(update={"timeout": 0.5})
    result = run_switchbot_command("hang", [], settings=settings)
    assert not result.success
    assert result.error == "Command timed out after 0.5s"


def test_no_timeout_by_default(monkeypatch):
    seen = {}

    def fake_run(argv, capture_output, timeout, **kwargs):
        seen["timeout"] = timeout
        return SimpleNamespace(returncode=0, stdout="done\n", stderr="")

    monkeypatch.setattr(runner, "subprocess", SimpleNamespace(run=fake_run))
    result = run_switchbot_command("server", settings=Settings())
    assert seen["timeout"] is None
    assert result.output == "done"


def test_settings_default_from_environment(monkeypatch):
    calls = []

    def fake_run(argv, capture_output, timeout, **kwargs):
        calls.append(argv)
        return SimpleNamespace(returncode=0, stdout="", stderr="")

    monkeypatch.setenv("SWITCHBOT_INTERPRETER", "nodejs")
    monkeypatch.setenv("SWITCHBOT_CLI_PATH", "/srv/bot-cmd.mjs")
    monkeypatch.setattr(runner, "subprocess", SimpleNamespace(run=fake_run))
    run_switchbot_command("scan")
    assert calls == [["nodejs", "/srv/bot-cmd.mjs", "scan"]]


def test_format_result_success_is_verbatim():
    assert format_result(ExecutionResult(success=True, output="Device ID: aa")) == "Device ID: aa"


def test_undecodable_output_is_replaced(cli_settings):
    result = run_switchbot_command("garbled", [], settings=cli_settings)
    assert result.success
    assert result.output == "Device ID: aa \ufffd name"

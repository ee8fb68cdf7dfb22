import subprocess
from unittest.mock import patch

import pytest

import run


def test_parse_args_live_keyword():
    args = run.parse_args(["live", "-k", "s3"])
    assert args.command == "live"
    assert args.keyword == "s3"


def test_parse_args_rejects_unknown():
    with pytest.raises(SystemExit):
        run.parse_args(["score"])


def test_summarize_with_coverage():
    output = "collected 12 items\n...\nTOTAL    300    30    90%\n10 passed, 2 failed"
    assert run.summarize(output) == "10/12 test cases passed. 90% line coverage achieved."


def test_summarize_without_coverage():
    assert run.summarize("collected 3 items\n3 passed") == "3/3 test cases passed."


@patch("run.subprocess.run")
def test_do_test_runs_unit_suite_with_coverage(mock_run, capsys):
    mock_run.return_value = subprocess.CompletedProcess([], 0, stdout="collected 2 items\n2 passed", stderr="")

    assert run.do_test() == 0
    cmd = mock_run.call_args.args[0]
    assert cmd[1:4] == ["-m", "pytest", "tests/unit"]
    assert "--cov=cloudprobe" in cmd
    assert "2/2 test cases passed." in capsys.readouterr().out


@patch("run.subprocess.run")
def test_do_live_sets_flag(mock_run):
    mock_run.return_value = subprocess.CompletedProcess([], 1, stdout="collected 1 item\n1 failed", stderr="")

    assert run.do_live("ec2") == 1
    cmd = mock_run.call_args.args[0]
    assert cmd[-2:] == ["-k", "ec2"]
    assert mock_run.call_args.kwargs["env"]["CLOUDPROBE_LIVE"] == "1"


@patch("run.subprocess.check_call", side_effect=subprocess.CalledProcessError(2, "pip"))
def test_do_install_reports_pip_failure(mock_check_call):
    assert run.do_install() == 2


def test_main_without_arguments(capsys):
    assert run.main([]) == 1
    assert "Usage" in capsys.readouterr().err


@patch("run.do_test", return_value=0)
@patch("run.configure_logging")
def test_main_passes_session_when_cloudwatch_group_set(mock_configure, mock_do_test, monkeypatch):
    monkeypatch.setenv("CLOUDWATCH_LOG_GROUP", "/cloudprobe/runs")
    monkeypatch.setenv("AWS_REGION", "eu-west-1")

    assert run.main(["test"]) == 0

    config = mock_configure.call_args.args[0]
    session = mock_configure.call_args.kwargs["session"]
    assert config.cloudwatch_log_group == "/cloudprobe/runs"
    assert session is not None
    assert session.region_name == "eu-west-1"


@patch("run.do_test", return_value=0)
@patch("run.configure_logging")
def test_main_without_cloudwatch_group_has_no_session(mock_configure, mock_do_test, monkeypatch):
    monkeypatch.delenv("CLOUDWATCH_LOG_GROUP", raising=False)

    assert run.main(["test"]) == 0
    assert mock_configure.call_args.kwargs["session"] is None

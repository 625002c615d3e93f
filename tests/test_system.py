import subprocess

from sentry_wizard.apple.system import MacOSSystemHelpers


def test_environment_takes_precedence(monkeypatch):
    monkeypatch.setenv("SDKROOT", "/sdk")
    monkeypatch.setenv("DEVELOPER_DIR", "/developer")
    assert MacOSSystemHelpers.find_sdk_root_directory_path() == "/sdk"
    assert MacOSSystemHelpers.find_developer_directory_path() == "/developer"


def test_queries_xcode(monkeypatch):
    monkeypatch.delenv("SDKROOT")
    monkeypatch.delenv("DEVELOPER_DIR")
    calls = []

    def fake_run(args, **kwargs):
        calls.append(args)
        return subprocess.CompletedProcess(args, 0, stdout=f"/from/{args[0]}\n", stderr="")

    monkeypatch.setattr(subprocess, "run", fake_run)
    assert MacOSSystemHelpers.find_sdk_root_directory_path() == "/from/xcrun"
    assert MacOSSystemHelpers.find_developer_directory_path() == "/from/xcode-select"
    assert calls == [["xcrun", "--show-sdk-path"], ["xcode-select", "-p"]]


def test_missing_tools(monkeypatch):
    monkeypatch.delenv("SDKROOT")
    monkeypatch.delenv("DEVELOPER_DIR")

    def fake_run(args, **kwargs):
        raise FileNotFoundError(args[0])

    monkeypatch.setattr(subprocess, "run", fake_run)
    assert MacOSSystemHelpers.find_sdk_root_directory_path() is None
    assert MacOSSystemHelpers.find_developer_directory_path() is None


def test_failing_tools(monkeypatch):
    monkeypatch.delenv("SDKROOT")
    monkeypatch.delenv("DEVELOPER_DIR")
    monkeypatch.setattr(
        subprocess,
        "run",
        lambda args, **kwargs: subprocess.CompletedProcess(args, 1, stdout="", stderr="error"),
    )
    assert MacOSSystemHelpers.find_sdk_root_directory_path() is None

import pytest

from sentry_wizard.__main__ import main
from sentry_wizard.apple.xcode import XcodeProject


def run(argv):
    with pytest.raises(SystemExit) as exc_info:
        main(argv)
    return exc_info.value.code


def test_targets(copy_project, capsys):
    bundle = copy_project("multi-target")
    assert run(["targets", "--project", str(bundle)]) == 0
    assert capsys.readouterr().out.splitlines() == ["Project1", "Project2"]


def test_project_is_required(capsys):
    assert run(["targets"]) == 1
    assert "requires --project" in capsys.readouterr().err


def test_invalid_project_path(tmp_path, capsys):
    assert run(["targets", "--project", str(tmp_path / "Podfile")]) == 1
    assert "ERROR" in capsys.readouterr().err


def test_validate(copy_project, capsys):
    bundle = copy_project("single-target")
    assert run(["validate", "--project", str(bundle)]) == 0
    assert capsys.readouterr().out.strip().endswith(": ok")


def test_sources(copy_project, tmp_path, capsys):
    bundle = copy_project("single-target")
    sources = tmp_path / "Project"
    sources.mkdir()
    (sources / "App.swift").write_text("import SwiftUI\n\n@main\nstruct App {}\n", encoding="utf-8")

    assert run(["sources", "--project", str(bundle), "Project"]) == 0
    out = capsys.readouterr().out
    assert "Project : 4 lines" in out
    assert "Project/App.swift : 4 lines" in out


def test_sources_unknown_target(copy_project, capsys):
    bundle = copy_project("single-target")
    assert run(["sources", "--project", str(bundle), "Missing"]) == 1
    assert "Missing not found" in capsys.readouterr().err


def test_configure(copy_project, tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("SENTRY_ORG", "test-org")
    monkeypatch.setenv("SENTRY_PROJECT", "test-project")
    monkeypatch.setenv("SENTRY_AUTH_TOKEN", "sntrys_token")
    bundle = copy_project("single-target")

    assert run(["configure", "--project", str(bundle), "--spm"]) == 0

    project = XcodeProject(bundle)
    assert len(list(project.document.entries("PBXShellScriptBuildPhase"))) == 1
    assert len(list(project.document.entries("XCSwiftPackageProductDependency"))) == 1
    assert (tmp_path / ".sentryclirc").read_text(encoding="utf-8") == "[auth]\ntoken=sntrys_token\n"
    assert ".sentryclirc" in (tmp_path / ".gitignore").read_text(encoding="utf-8").splitlines()
    assert "Configuring Project..." in capsys.readouterr().out


def test_configure_requires_slugs(copy_project, monkeypatch, capsys):
    monkeypatch.delenv("SENTRY_ORG", raising=False)
    monkeypatch.delenv("SENTRY_PROJECT", raising=False)
    bundle = copy_project("single-target")
    assert run(["configure", "--project", str(bundle)]) == 1
    assert "SENTRY_ORG" in capsys.readouterr().err


def test_configure_unknown_target(copy_project, monkeypatch, capsys):
    bundle = copy_project("single-target")
    assert run(["configure", "--project", str(bundle), "--org", "org", "--project-slug", "project", "Missing"]) == 1
    assert "Missing not found" in capsys.readouterr().err


def test_gradle(tmp_path, capsys):
    build_gradle = tmp_path / "build.gradle"
    build_gradle.write_text('apply plugin: "com.android.application"\n\nandroid {\n}\n', encoding="utf-8")

    assert run(["gradle", str(build_gradle)]) == 0
    assert "sentry.gradle" in build_gradle.read_text(encoding="utf-8")
    assert "Added sentry.gradle" in capsys.readouterr().out


def test_gradle_missing_file(tmp_path, capsys):
    assert run(["gradle", str(tmp_path / "build.gradle")]) == 1
    assert "not found" in capsys.readouterr().err


def test_configure_target_after_options(copy_project, monkeypatch):
    monkeypatch.delenv("SENTRY_AUTH_TOKEN", raising=False)
    bundle = copy_project("single-target")
    argv = ["configure", "--project", str(bundle), "--org", "org", "--project-slug", "project", "--spm", "Project"]
    assert run(argv) == 0

    project = XcodeProject(bundle)
    assert len(list(project.document.entries("PBXShellScriptBuildPhase"))) == 1
    assert len(list(project.document.entries("XCSwiftPackageProductDependency"))) == 1

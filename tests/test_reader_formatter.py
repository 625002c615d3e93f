import pytest

from conftest import fixture_project
from sentry_wizard.apple.xcode.formatter import format_string, format_xcode_project
from sentry_wizard.apple.xcode.model import Document, ParsedString, QuotedString, Reference, XcodeID
from sentry_wizard.apple.xcode.reader import (
    load_document,
    parse_document,
    project_file_path,
    scan_comments,
)


def read_text(path) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


@pytest.mark.parametrize("name", ["single-target", "multi-target", "no-targets"])
def test_round_trip_is_byte_identical(name):
    pbxproj = fixture_project(name) / "project.pbxproj"
    document = load_document(pbxproj)
    assert format_xcode_project(document) == read_text(pbxproj)


def test_load_accepts_bundle_and_file():
    bundle = fixture_project("single-target")
    from_bundle = load_document(bundle)
    from_file = load_document(bundle / "project.pbxproj")
    assert from_bundle.project_name == "Project"
    assert from_file.project_name == "Project"
    assert from_bundle.root_object == from_file.root_object == "D4E604C42D50CEEC00CAB00F"


def test_project_file_path_rejects_other_paths(tmp_path):
    with pytest.raises(ValueError):
        project_file_path(tmp_path / "Project.xcworkspace")


def test_ids_become_references():
    document = load_document(fixture_project("single-target"))
    target = document.resolve("PBXNativeTarget", "D4E604CC2D50CEEC00CAB00F")
    assert isinstance(target["buildConfigurationList"], XcodeID)
    assert target["buildPhases"] == [
        Reference(XcodeID("D4E604C92D50CEEC00CAB00F"), "Sources"),
        Reference(XcodeID("D4E604CA2D50CEEC00CAB00F"), "Frameworks"),
        Reference(XcodeID("D4E604CB2D50CEEC00CAB00F"), "Resources"),
    ]
    assert document.objects["PBXNativeTarget"]["D4E604CC2D50CEEC00CAB00F_comment"] == "Project"


def test_scan_comments():
    text = "\t\tAAAAAAAAAAAAAAAAAAAAAAA1 /* Upload Debug Symbols to Sentry */,\n"
    assert scan_comments(text) == {"AAAAAAAAAAAAAAAAAAAAAAA1": "Upload Debug Symbols to Sentry"}


def test_dangling_reference_keeps_comment_from_file(tmp_path):
    pbxproj = fixture_project("single-target") / "project.pbxproj"
    text = read_text(pbxproj).replace(
        "\t\t\t\tD4E604CB2D50CEEC00CAB00F /* Resources */,\n",
        "\t\t\t\tD4E604CB2D50CEEC00CAB00F /* Resources */,\n"
        "\t\t\t\tDDDDDDDDDDDDDDDDDDDDDDDD /* Upload Debug Symbols to Sentry */,\n",
    )
    damaged = tmp_path / "Project.xcodeproj"
    damaged.mkdir()
    (damaged / "project.pbxproj").write_text(text, encoding="utf-8")

    document = load_document(damaged)
    target = document.resolve("PBXNativeTarget", "D4E604CC2D50CEEC00CAB00F")
    assert target["buildPhases"][-1] == Reference(
        XcodeID("DDDDDDDDDDDDDDDDDDDDDDDD"), "Upload Debug Symbols to Sentry"
    )
    assert format_xcode_project(document) == text


TARGET_DEBUG_ID = "D4E604DD2D50CEEE00CAB00F"


def fixture_text_with_escaped_settings() -> str:
    text = read_text(fixture_project("single-target") / "project.pbxproj")
    text = text.replace(
        "\t\t\t\tCURRENT_PROJECT_VERSION = 1;\n",
        "\t\t\t\tCURRENT_PROJECT_VERSION = 1;\n"
        '\t\t\t\tDEVELOPMENT_ASSET_PATHS = "\\"Project/Preview Content\\"";\n',
        1,
    )
    return text.replace(
        "\t\t\t\tMARKETING_VERSION = 1.0;\n",
        "\t\t\t\tMARKETING_VERSION = 1.0;\n"
        '\t\t\t\tOTHER_SWIFT_FLAGS = "-D\\\\FOO\\tBAR";\n',
        1,
    )


def test_escaped_values_round_trip():
    text = fixture_text_with_escaped_settings()
    document = parse_document(text, project_name="Project")
    assert format_xcode_project(document) == text


def test_escaped_values_are_unescaped_in_memory():
    document = parse_document(fixture_text_with_escaped_settings(), project_name="Project")
    settings = document.resolve("XCBuildConfiguration", TARGET_DEBUG_ID)["buildSettings"]
    assert settings["DEVELOPMENT_ASSET_PATHS"] == '"Project/Preview Content"'
    assert settings["OTHER_SWIFT_FLAGS"] == "-D\\FOO\tBAR"


def test_changed_values_are_escaped():
    document = parse_document(fixture_text_with_escaped_settings(), project_name="Project")
    settings = document.resolve("XCBuildConfiguration", TARGET_DEBUG_ID)["buildSettings"]
    settings["OTHER_SWIFT_FLAGS"] = settings["OTHER_SWIFT_FLAGS"] + " -DBAZ"
    assert '\t\t\t\tOTHER_SWIFT_FLAGS = "-D\\\\FOO\\tBAR -DBAZ";\n' in format_xcode_project(document)


def test_quoted_safe_value_stays_quoted():
    text = read_text(fixture_project("single-target") / "project.pbxproj").replace(
        "\t\t\t\tENABLE_PREVIEWS = YES;\n",
        '\t\t\t\tENABLE_PREVIEWS = "YES";\n',
        1,
    )
    document = parse_document(text, project_name="Project")
    assert format_xcode_project(document) == text


@pytest.mark.parametrize(
    "value, expected",
    [
        ("Release", "Release"),
        ("io.sentry.Project", "io.sentry.Project"),
        ("/bin/sh", "/bin/sh"),
        ("$(TARGET_NAME)", '"$(TARGET_NAME)"'),
        ("dwarf-with-dsym", '"dwarf-with-dsym"'),
        ('"dwarf-with-dsym"', '"\\"dwarf-with-dsym\\""'),
        ("-D\\FOO\tBAR", '"-D\\\\FOO\\tBAR"'),
        ('a\\"', '"a\\\\\\""'),
        ("line\nbreak", '"line\\nbreak"'),
        (QuotedString('"NO"'), '"NO"'),
        (ParsedString("NO", '"NO"'), '"NO"'),
        ("", '""'),
        ("<group>", '"<group>"'),
        ("Upload Debug Symbols to Sentry", '"Upload Debug Symbols to Sentry"'),
    ],
)
def test_format_string(value, expected):
    assert format_string(value) == expected


def test_format_new_objects():
    document = Document(project_name="Project")
    document.add_object(
        XcodeID("AAAAAAAAAAAAAAAAAAAAAAA1"),
        {"isa": "PBXShellScriptBuildPhase", "files": [], "buildActionMask": 2147483647, "name": "Run"},
        comment="Run",
    )
    assert format_xcode_project(document) == (
        "// !$*UTF8*$!\n"
        "{\n"
        "\tarchiveVersion = 1;\n"
        "\tclasses = {\n"
        "\t};\n"
        "\tobjectVersion = 77;\n"
        "\tobjects = {\n"
        "\n"
        "/* Begin PBXShellScriptBuildPhase section */\n"
        "\t\tAAAAAAAAAAAAAAAAAAAAAAA1 /* Run */ = {\n"
        "\t\t\tisa = PBXShellScriptBuildPhase;\n"
        "\t\t\tbuildActionMask = 2147483647;\n"
        "\t\t\tfiles = (\n"
        "\t\t\t);\n"
        "\t\t\tname = Run;\n"
        "\t\t};\n"
        "/* End PBXShellScriptBuildPhase section */\n"
        "\t};\n"
        "}\n"
    )

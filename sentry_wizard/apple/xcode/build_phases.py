# Shell script build phase maintenance.
#
# The upload phase is recognized by the comment attached to its reference in a
# target's buildPhases. Running the wizard twice must update that phase rather
# than add a second one.

from typing import List, Optional

from sentry_wizard.apple.xcode.model import (
    Document,
    PBXObject,
    QuotedString,
    Reference,
    XcodeID,
    find_target,
    reference_list,
)

UPLOAD_SYMBOLS_PHASE_NAME = "Upload Debug Symbols to Sentry"

DSYM_INPUT_PATH = QuotedString('"${DWARF_DSYM_FOLDER_PATH}/${DWARF_DSYM_FILE_NAME}/Contents/Resources/DWARF/${TARGET_NAME}"')

DEFAULT_BUILD_ACTION_MASK = 2147483647


def quote_shell_script(script: str) -> QuotedString:
    escaped = script.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
    return QuotedString(f'"{escaped}"')


def remove_orphaned_build_phases(document: Document, name: str) -> List[XcodeID]:
    """
    Drop references to phases named `name` that point at no shell script phase.

    Every target is cleaned, not only the one being updated. Returns the ids of
    the removed references.
    """
    removed: List[XcodeID] = []
    for _, target in document.entries("PBXNativeTarget"):
        build_phases = target.get("buildPhases")
        if not isinstance(build_phases, list):
            continue
        kept = []
        for ref in build_phases:
            if (
                isinstance(ref, Reference)
                and ref.comment == name
                and document.resolve("PBXShellScriptBuildPhase", ref.id) is None
            ):
                removed.append(ref.id)
                continue
            kept.append(ref)
        if len(kept) != len(build_phases):
            target["buildPhases"] = kept
    return removed


def add_script_build_phase(
    document: Document,
    target_id: str,
    name: str,
    script: str,
    input_paths: List[str],
) -> XcodeID:
    phase_id = document.generate_id()
    phase: PBXObject = {
        "isa": "PBXShellScriptBuildPhase",
        "buildActionMask": DEFAULT_BUILD_ACTION_MASK,
        "files": [],
        "inputPaths": list(input_paths),
        "name": name,
        "outputPaths": [],
        "runOnlyForDeploymentPostprocessing": 0,
        "shellPath": "/bin/sh",
        "shellScript": quote_shell_script(script),
    }
    document.add_object(phase_id, phase, comment=name)

    # A target without buildPhases keeps the phase unattached
    target = document.resolve("PBXNativeTarget", target_id)
    if target is not None and isinstance(target.get("buildPhases"), list):
        target["buildPhases"].append(Reference(phase_id, name))
    return phase_id


def update_script_build_phase(
    document: Document, phase_id: str, script: str, input_paths: List[str]
) -> bool:
    phase = document.resolve("PBXShellScriptBuildPhase", phase_id)
    if phase is None:
        return False
    phase["shellScript"] = quote_shell_script(script)
    phase["inputPaths"] = list(input_paths)
    return True


def find_script_build_phase(document: Document, target: PBXObject, name: str) -> Optional[XcodeID]:
    for ref in reference_list(target, "buildPhases"):
        if ref.comment != name:
            continue
        if document.resolve("PBXShellScriptBuildPhase", ref.id) is not None:
            return ref.id
    return None


def add_or_update_script(
    document: Document,
    target_name: str,
    name: str,
    script: str,
    input_paths: List[str],
) -> Optional[XcodeID]:
    """
    Make sure the named target runs `script` in exactly one phase called `name`.

    Returns the id of the updated or created phase, None when the target does
    not exist. Dangling references named `name` are removed from all targets.
    """
    found = find_target(document, target_name)
    if found is None:
        return None
    target_id, target = found

    remove_orphaned_build_phases(document, name)

    phase_id = find_script_build_phase(document, target, name)
    if phase_id is not None:
        update_script_build_phase(document, phase_id, script, input_paths)
        return phase_id
    return add_script_build_phase(document, target_id, name, script, input_paths)

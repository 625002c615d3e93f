from typing import Iterator

from sentry_wizard.apple.xcode.model import (
    Document,
    PBXObject,
    QuotedString,
    find_target,
    reference_list,
)

DEBUG_SYMBOL_SETTINGS = {
    "DEBUG_INFORMATION_FORMAT": QuotedString('"dwarf-with-dsym"'),
    "ENABLE_USER_SCRIPT_SANDBOXING": QuotedString('"NO"'),
}


def target_build_configurations(document: Document, target: PBXObject) -> Iterator[PBXObject]:
    configuration_list = document.resolve(
        "XCConfigurationList", target.get("buildConfigurationList")
    )
    if configuration_list is None:
        return
    for ref in reference_list(configuration_list, "buildConfigurations"):
        configuration = document.resolve("XCBuildConfiguration", ref.id)
        if configuration is not None:
            yield configuration


def patch_debug_symbol_settings(document: Document, target_name: str, enable: bool) -> int:
    """
    Make every configuration of the target produce dSYMs the upload script can read.

    Only the target's own configuration list is patched, project level settings
    are left alone. Disabling does not restore the previous values. Returns the
    number of configurations changed.
    """
    if not enable:
        return 0
    found = find_target(document, target_name)
    if found is None:
        return 0
    _, target = found
    patched = 0
    for configuration in target_build_configurations(document, target):
        build_settings = configuration.get("buildSettings")
        if not isinstance(build_settings, dict):
            continue
        build_settings.update(DEBUG_SYMBOL_SETTINGS)
        patched += 1
    return patched

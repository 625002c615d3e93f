import os
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from sentry_wizard.apple.system import MacOSSystemHelpers
from sentry_wizard.apple.templates import get_run_script_template
from sentry_wizard.apple.xcode.build_phases import (
    DSYM_INPUT_PATH,
    UPLOAD_SYMBOLS_PHASE_NAME,
    add_or_update_script,
    add_script_build_phase,
    update_script_build_phase,
)
from sentry_wizard.apple.xcode.build_settings import patch_debug_symbol_settings
from sentry_wizard.apple.xcode.formatter import format_xcode_project
from sentry_wizard.apple.xcode.model import (
    Document,
    PBXObject,
    Section,
    XcodeID,
    find_target,
    unquote,
)
from sentry_wizard.apple.xcode.packages import (
    SENTRY_COCOA_REPOSITORY_URL,
    SENTRY_MINIMUM_VERSION,
    SENTRY_PRODUCT_NAME,
    add_package_dependency,
)
from sentry_wizard.apple.xcode.reader import load_document, project_file_path
from sentry_wizard.apple.xcode.sources import (
    SourceTreeRoots,
    find_files_in_source_build_phase,
    find_files_in_synchronized_root_groups,
    find_source_build_phase,
    get_source_files_for_target,
)
from sentry_wizard.apple.xcode.validator import validate_references
from sentry_wizard.details.project_data import SentryProjectData

HOMEBREW_SENTRY_CLI_PATH = "/opt/homebrew/bin/sentry-cli"


def is_homebrew_sentry_cli_installed() -> bool:
    return os.path.exists(HOMEBREW_SENTRY_CLI_PATH)


class XcodeProject:
    """
    A project.pbxproj loaded for editing.

    All mutations happen in memory, nothing is written until save() is called.
    Lookups and mutations tolerate a damaged document: missing objects are
    skipped and unknown targets turn every mutation into a no-op.
    """

    def __init__(self, project_path: Union[str, Path]):
        self.path = project_file_path(project_path)
        # Paths in the project are relative to the folder holding the .xcodeproj bundle
        self.base_dir = str(self.path.parent.parent)
        self.document: Document = load_document(self.path)

    @property
    def objects(self) -> Dict[str, Section]:
        return self.document.objects

    def source_tree_roots(self) -> SourceTreeRoots:
        return SourceTreeRoots(
            base_dir=self.base_dir,
            sdk_root=MacOSSystemHelpers.find_sdk_root_directory_path(),
            developer_dir=MacOSSystemHelpers.find_developer_directory_path(),
        )

    def get_all_targets(self) -> List[str]:
        targets = []
        for _, target in self.document.entries("PBXNativeTarget"):
            configuration_list = self.document.resolve(
                "XCConfigurationList", target.get("buildConfigurationList")
            )
            if configuration_list is None:
                continue
            name = unquote(target.get("name"))
            if isinstance(name, str) and name not in targets:
                targets.append(name)
        return targets

    def find_target(self, target_name: str) -> Optional[Tuple[XcodeID, PBXObject]]:
        return find_target(self.document, target_name)

    def get_source_files_for_target(self, target_name: str) -> Optional[List[str]]:
        return get_source_files_for_target(self.document, target_name, self.source_tree_roots())

    def find_source_build_phase(self, target: PBXObject) -> Optional[PBXObject]:
        return find_source_build_phase(self.document, target)

    def find_files_in_source_build_phase(self, target: PBXObject) -> List[str]:
        return find_files_in_source_build_phase(self.document, target, self.source_tree_roots())

    def find_files_in_synchronized_root_groups(self, target_id: str, target: PBXObject) -> List[str]:
        return find_files_in_synchronized_root_groups(
            self.document, target_id, target, self.source_tree_roots()
        )

    def add_upload_symbols_script(
        self,
        project_data: SentryProjectData,
        target_name: str,
        upload_source: bool = True,
    ) -> Optional[XcodeID]:
        script = get_run_script_template(
            project_data.org_slug,
            project_data.slug,
            upload_source,
            is_homebrew_sentry_cli_installed(),
        )
        return add_or_update_script(
            self.document,
            target_name,
            UPLOAD_SYMBOLS_PHASE_NAME,
            script,
            [DSYM_INPUT_PATH],
        )

    def add_script_build_phase(
        self, target_id: str, name: str, script: str, input_paths: List[str]
    ) -> XcodeID:
        return add_script_build_phase(self.document, target_id, name, script, input_paths)

    def update_script_build_phase(self, phase_id: str, script: str, input_paths: List[str]) -> bool:
        return update_script_build_phase(self.document, phase_id, script, input_paths)

    def patch_debug_symbol_settings(self, target_name: str, enable: bool) -> int:
        return patch_debug_symbol_settings(self.document, target_name, enable)

    def add_package_dependency(
        self,
        target_name: str,
        repository_url: str = SENTRY_COCOA_REPOSITORY_URL,
        product_name: str = SENTRY_PRODUCT_NAME,
        minimum_version: str = SENTRY_MINIMUM_VERSION,
    ) -> Optional[XcodeID]:
        return add_package_dependency(
            self.document, target_name, repository_url, product_name, minimum_version
        )

    def update_xcode_project(
        self,
        project_data: SentryProjectData,
        target_name: str,
        add_spm_reference: bool,
        upload_source: bool = True,
    ) -> None:
        self.add_upload_symbols_script(project_data, target_name, upload_source)
        if upload_source:
            self.patch_debug_symbol_settings(target_name, upload_source)
        if add_spm_reference:
            self.add_package_dependency(target_name)
        self.save()

    def validate(self) -> List[str]:
        return validate_references(self.document)

    def save(self, path: Optional[Union[str, Path]] = None) -> Path:
        output_path = project_file_path(path) if path is not None else self.path
        self.document.refresh_comments()
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(format_xcode_project(self.document))
        return output_path

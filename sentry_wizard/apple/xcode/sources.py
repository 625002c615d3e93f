# Source file collection for a target.
#
# Computes the files Xcode compiles for a target: the files listed in its
# sources build phase plus every file inside the synchronized folders attached
# to the target, minus the target's membership exceptions.
#
# Known limitations:
# - files below BUILT_PRODUCTS_DIR are not resolved and therefore omitted.
# - only synchronized folders referenced directly by the target are scanned.
#   Xcode also picks up synchronized folders nested inside plain groups of the
#   main group, which would require treating every root group as a candidate.

import os

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, FrozenSet, List, Optional, Set

from sentry_wizard.apple.xcode.model import (
    GROUP_TYPES,
    Document,
    PBXObject,
    SourceTree,
    XcodeID,
    find_target,
    reference_list,
    unquote,
)
from sentry_wizard.details.glob_filter import files_with_exclusions


@dataclass
class SourceTreeRoots:
    base_dir: str
    sdk_root: Optional[str] = None
    developer_dir: Optional[str] = None


def _group_parents(document: Document) -> Dict[str, XcodeID]:
    parents: Dict[str, XcodeID] = {}
    for isa in GROUP_TYPES:
        for group_id, group in document.entries(isa):
            for ref in reference_list(group, "children"):
                parents.setdefault(ref.id, group_id)
    return parents


class PathResolver:
    def __init__(self, document: Document, roots: SourceTreeRoots):
        self.document = document
        self.roots = roots
        self.parents = _group_parents(document)

    def _parent_group(self, object_id: str) -> Optional[tuple]:
        parent_id = self.parents.get(object_id)
        if parent_id is None:
            return None
        for isa in GROUP_TYPES:
            parent = self.document.resolve(isa, parent_id)
            if parent is not None:
                return parent_id, parent
        return None

    def _anchor(self, object_id: str, obj: PBXObject, seen: FrozenSet[str]) -> Optional[str]:
        source_tree = unquote(obj.get("sourceTree"))
        if not source_tree or source_tree == SourceTree.SOURCE_ROOT.value:
            return self.roots.base_dir
        if source_tree == SourceTree.GROUP.value:
            parent = self._parent_group(object_id)
            # The main group, and anything detached from the group tree, sits at the project root
            if parent is None or parent[0] in seen:
                return self.roots.base_dir
            return self.resolve(parent[0], parent[1], seen | {object_id})
        if source_tree == SourceTree.SDKROOT.value:
            return self.roots.sdk_root
        if source_tree == SourceTree.DEVELOPER_DIR.value:
            return self.roots.developer_dir
        if source_tree == SourceTree.BUILT_PRODUCTS_DIR.value:
            return None
        if source_tree == SourceTree.ABSOLUTE.value:
            return ""
        return source_tree

    def resolve(self, object_id: str, obj: PBXObject, seen: FrozenSet[str] = frozenset()) -> Optional[str]:
        """Absolute path of a file reference or group, None if it can't be resolved."""
        anchor = self._anchor(object_id, obj, seen)
        if anchor is None:
            return None
        path = unquote(obj.get("path"))
        if not isinstance(path, str) or not path:
            return anchor
        return os.path.normpath(os.path.join(anchor, path))


def find_source_build_phase(document: Document, target: PBXObject) -> Optional[PBXObject]:
    for ref in reference_list(target, "buildPhases"):
        phase = document.resolve("PBXSourcesBuildPhase", ref.id)
        if phase is not None:
            return phase
    return None


def find_files_in_source_build_phase(
    document: Document, target: PBXObject, roots: SourceTreeRoots
) -> List[str]:
    phase = find_source_build_phase(document, target)
    if phase is None:
        return []
    resolver = PathResolver(document, roots)
    files: List[str] = []
    for ref in reference_list(phase, "files"):
        build_file = document.resolve("PBXBuildFile", ref.id)
        if build_file is None:
            continue
        file_ref_id = build_file.get("fileRef")
        file_ref = document.resolve("PBXFileReference", file_ref_id)
        if file_ref is None or not file_ref.get("path"):
            continue
        path = resolver.resolve(file_ref_id, file_ref)
        if path:
            files.append(path)
    return files


def membership_exceptions(document: Document, group: PBXObject, target_id: str) -> Set[str]:
    excluded: Set[str] = set()
    for ref in reference_list(group, "exceptions"):
        exception_set = document.resolve(
            "PBXFileSystemSynchronizedBuildFileExceptionSet", ref.id
        )
        if exception_set is None or exception_set.get("target") != target_id:
            continue
        for entry in exception_set.get("membershipExceptions") or []:
            if isinstance(entry, str):
                excluded.add(unquote(entry))
    return excluded


def find_files_in_synchronized_root_groups(
    document: Document, target_id: str, target: PBXObject, roots: SourceTreeRoots
) -> List[str]:
    resolver = PathResolver(document, roots)
    files: List[str] = []
    for ref in reference_list(target, "fileSystemSynchronizedGroups"):
        group = document.resolve("PBXFileSystemSynchronizedRootGroup", ref.id)
        if group is None or not group.get("path"):
            continue
        group_dir = resolver.resolve(ref.id, group)
        if not group_dir:
            continue
        excludes = membership_exceptions(document, group, target_id)
        files.extend(files_with_exclusions(Path(group_dir), excludes))
    return files


def get_source_files_for_target(
    document: Document, target_name: str, roots: SourceTreeRoots
) -> Optional[List[str]]:
    """
    List the absolute paths of every file compiled for the named target.

    Returns None when the target does not exist. Files that appear both in the
    sources build phase and in a synchronized folder are listed twice.
    """
    found = find_target(document, target_name)
    if found is None:
        return None
    target_id, target = found
    return find_files_in_source_build_phase(
        document, target, roots
    ) + find_files_in_synchronized_root_groups(document, target_id, target, roots)

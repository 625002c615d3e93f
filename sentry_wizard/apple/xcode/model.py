# Xcode project document model.
#
# A loaded project.pbxproj is kept as a two level mapping: object type (isa) to
# object id to either the object itself (a dict carrying "isa") or, under the
# "<id>_comment" key, the human readable comment Xcode prints next to the id.
# Objects point at each other by id only, so every lookup may come back empty.

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

import uuid


# Type definition for Xcode object identifiers
class XcodeID(str):
    pass


# A value set by the wizard that already carries its quotes and escapes, written as is
class QuotedString(str):
    pass


class ParsedString(str):
    """
    A string value read from a project file.

    The value is the unescaped text, `token` is the text as it was spelled in
    the file, quotes included. Untouched values are written back from their
    token, so they keep the exact escaping Xcode used.
    """

    def __new__(cls, value: str, token: Optional[str] = None):
        obj = super().__new__(cls, value)
        obj.token = token
        return obj


@dataclass
class Reference:
    id: XcodeID
    comment: Optional[str] = None


# Source Tree values used in PBXFileReference and PBXGroup
class SourceTree(Enum):
    GROUP = "<group>"
    SOURCE_ROOT = "SOURCE_ROOT"
    SDKROOT = "SDKROOT"
    DEVELOPER_DIR = "DEVELOPER_DIR"
    BUILT_PRODUCTS_DIR = "BUILT_PRODUCTS_DIR"
    ABSOLUTE = "<absolute>"


PBXObject = Dict[str, Any]
Section = Dict[str, Union[PBXObject, str]]

COMMENT_SUFFIX = "_comment"

# Default comments Xcode prints for build phases without a name
BUILD_PHASE_NAMES: Dict[str, str] = {
    "PBXSourcesBuildPhase": "Sources",
    "PBXFrameworksBuildPhase": "Frameworks",
    "PBXResourcesBuildPhase": "Resources",
    "PBXHeadersBuildPhase": "Headers",
    "PBXCopyFilesBuildPhase": "CopyFiles",
    "PBXShellScriptBuildPhase": "ShellScript",
    "PBXRezBuildPhase": "Rez",
}

GROUP_TYPES = ("PBXGroup", "PBXVariantGroup", "XCVersionGroup")
TARGET_TYPES = ("PBXNativeTarget", "PBXAggregateTarget", "PBXLegacyTarget")


def unquote(value: Any) -> Any:
    """Strip a single pair of surrounding double quotes from a string value."""
    if isinstance(value, str) and len(value) >= 2 and value[0] == value[-1] == '"':
        return value[1:-1]
    return value


def is_comment_key(key: str) -> bool:
    return key.endswith(COMMENT_SUFFIX)


def repository_name(repository_url: str) -> str:
    name = unquote(repository_url).rstrip("/").split("/")[-1]
    if name.endswith(".git"):
        name = name[: -len(".git")]
    return name


class Document:
    def __init__(
        self,
        objects: Optional[Dict[str, Section]] = None,
        root_object: Optional[XcodeID] = None,
        archive_version: str = "1",
        object_version: str = "77",
        classes: Optional[dict] = None,
        project_name: Optional[str] = None,
    ):
        self.objects: Dict[str, Section] = objects if objects is not None else {}
        self.root_object = root_object
        self.archive_version = archive_version
        self.object_version = object_version
        self.classes = classes if classes is not None else {}
        self.project_name = project_name

    def section(self, isa: str) -> Section:
        section = self.objects.get(isa)
        return section if isinstance(section, dict) else {}

    def resolve(self, isa: str, object_id: Optional[str]) -> Optional[PBXObject]:
        if not object_id:
            return None
        value = self.section(isa).get(object_id)
        if not isinstance(value, dict):
            return None
        if value.get("isa", isa) != isa:
            return None
        return value

    def entries(self, isa: str) -> Iterator[Tuple[XcodeID, PBXObject]]:
        for key, value in list(self.section(isa).items()):
            if is_comment_key(key) or not isinstance(value, dict):
                continue
            yield XcodeID(key), value

    def contains_id(self, object_id: str) -> bool:
        return any(
            isinstance(section, dict) and object_id in section
            for section in self.objects.values()
        )

    def generate_id(self) -> XcodeID:
        while True:
            object_id = XcodeID(uuid.uuid4().hex[:24].upper())
            if not self.contains_id(object_id):
                return object_id

    def add_object(self, object_id: XcodeID, obj: PBXObject, comment: Optional[str] = None) -> None:
        section = self.objects.get(obj["isa"])
        if not isinstance(section, dict):
            section = {}
            self.objects[obj["isa"]] = section
        section[object_id] = obj
        if comment is not None:
            section[object_id + COMMENT_SUFFIX] = comment

    def root_project(self) -> Optional[PBXObject]:
        return self.resolve("PBXProject", self.root_object)

    def comment_for(self, object_id: str) -> Optional[str]:
        for section in self.objects.values():
            if not isinstance(section, dict) or object_id not in section:
                continue
            comment = section.get(object_id + COMMENT_SUFFIX)
            if isinstance(comment, str):
                return comment
            value = section[object_id]
            if isinstance(value, dict):
                return describe_object(self, object_id, value)
        return None

    def refresh_comments(self) -> None:
        """Recompute every comment entry and reference comment from the object graph."""
        phase_of: Dict[str, str] = {}
        for isa in BUILD_PHASE_NAMES:
            for phase_id, phase in self.entries(isa):
                phase_comment = describe_object(self, phase_id, phase)
                for ref in reference_list(phase, "files"):
                    phase_of.setdefault(ref.id, phase_comment)
        for isa, section in self.objects.items():
            if not isinstance(section, dict):
                continue
            for object_id, obj in list(section.items()):
                if is_comment_key(object_id) or not isinstance(obj, dict):
                    continue
                comment = describe_object(self, object_id, obj, phase_of)
                if comment is None:
                    section.pop(object_id + COMMENT_SUFFIX, None)
                else:
                    section[object_id + COMMENT_SUFFIX] = comment
        for _, obj in self.all_objects():
            for reference in iter_references(obj):
                comment = self.comment_for(reference.id)
                if comment is not None:
                    reference.comment = comment

    def all_objects(self) -> Iterator[Tuple[XcodeID, PBXObject]]:
        for isa in list(self.objects):
            yield from self.entries(isa)


def iter_references(value: Any) -> Iterator[Reference]:
    if isinstance(value, Reference):
        yield value
    elif isinstance(value, list):
        for item in value:
            yield from iter_references(item)
    elif isinstance(value, dict):
        for key, item in value.items():
            if not is_comment_key(key):
                yield from iter_references(item)


def _owner_of_configuration_list(document: Document, list_id: str) -> Optional[Tuple[str, PBXObject]]:
    for isa in ("PBXProject",) + TARGET_TYPES:
        for _, obj in document.entries(isa):
            if obj.get("buildConfigurationList") == list_id:
                return isa, obj
    return None


def _phase_containing(document: Document, build_file_id: str) -> Optional[str]:
    for isa in BUILD_PHASE_NAMES:
        for phase_id, phase in document.entries(isa):
            files = phase.get("files")
            if isinstance(files, list) and any(
                isinstance(ref, Reference) and ref.id == build_file_id for ref in files
            ):
                return describe_object(document, phase_id, phase)
    return None


def _file_name(obj: PBXObject) -> Optional[str]:
    name = obj.get("name") or obj.get("path")
    return unquote(name) if isinstance(name, str) else None


def describe_object(
    document: Document,
    object_id: str,
    obj: PBXObject,
    phase_of: Optional[Dict[str, str]] = None,
) -> Optional[str]:
    """Derive the comment Xcode prints next to references to this object."""
    isa = obj.get("isa")
    if isa == "PBXBuildFile":
        if obj.get("fileRef"):
            file_comment = document.comment_for(obj["fileRef"])
        elif obj.get("productRef"):
            file_comment = document.comment_for(obj["productRef"])
        else:
            file_comment = None
        if phase_of is not None:
            phase_comment = phase_of.get(object_id)
        else:
            phase_comment = _phase_containing(document, object_id)
        if file_comment and phase_comment:
            return f"{file_comment} in {phase_comment}"
        return file_comment
    if isa in BUILD_PHASE_NAMES:
        name = obj.get("name")
        return unquote(name) if isinstance(name, str) else BUILD_PHASE_NAMES[isa]
    if isa in (
        "PBXFileReference",
        "PBXReferenceProxy",
        "PBXFileSystemSynchronizedRootGroup",
    ) + GROUP_TYPES:
        return _file_name(obj)
    if isa in TARGET_TYPES or isa == "XCBuildConfiguration":
        name = obj.get("name")
        return unquote(name) if isinstance(name, str) else None
    if isa == "PBXProject":
        return "Project object"
    if isa == "XCConfigurationList":
        owner = _owner_of_configuration_list(document, object_id)
        if owner is None:
            return None
        owner_isa, owner_obj = owner
        if owner_isa == "PBXProject":
            owner_name = document.project_name or ""
        else:
            owner_name = unquote(owner_obj.get("name", ""))
        return f'Build configuration list for {owner_isa} "{owner_name}"'
    if isa == "XCRemoteSwiftPackageReference":
        url = obj.get("repositoryURL")
        if not isinstance(url, str):
            return isa
        return f'{isa} "{repository_name(url)}"'
    if isa == "XCLocalSwiftPackageReference":
        path = obj.get("relativePath")
        return f'{isa} "{unquote(path)}"' if isinstance(path, str) else isa
    if isa == "XCSwiftPackageProductDependency":
        name = obj.get("productName")
        return unquote(name) if isinstance(name, str) else None
    if isa == "PBXFileSystemSynchronizedBuildFileExceptionSet":
        folder = None
        for _, group in document.entries("PBXFileSystemSynchronizedRootGroup"):
            exceptions = group.get("exceptions")
            if isinstance(exceptions, list) and any(
                isinstance(ref, Reference) and ref.id == object_id for ref in exceptions
            ):
                folder = _file_name(group)
                break
        target = None
        for isa_name in TARGET_TYPES:
            target = document.resolve(isa_name, obj.get("target"))
            if target is not None:
                break
        target_name = unquote(target.get("name", "")) if target else ""
        return f'Exceptions for "{folder or ""}" folder in "{target_name}" target'
    if isa in ("PBXContainerItemProxy", "PBXTargetDependency", "PBXBuildRule"):
        return isa
    return None


def find_target(document: Document, name: str) -> Optional[Tuple[XcodeID, PBXObject]]:
    """Return the first native target named exactly `name`, in document order."""
    for target_id, target in document.entries("PBXNativeTarget"):
        if unquote(target.get("name")) == name:
            return target_id, target
    return None


def reference_list(obj: PBXObject, key: str) -> List[Reference]:
    value = obj.get(key)
    if not isinstance(value, list):
        return []
    return [ref for ref in value if isinstance(ref, Reference)]

# Xcode project file reader.
#
# Parsing of the text format is delegated to openstep_parser; this module turns
# the resulting plain tree into a Document: objects are grouped by isa, id
# values become XcodeID / Reference instances and comments are derived.

import re

from pathlib import Path
from typing import Any, Dict, Optional, Set, Union

from openstep_parser import OpenStepDecoder

from sentry_wizard.apple.xcode.model import Document, ParsedString, Reference, XcodeID

ID_PATTERN = re.compile(r"^[0-9A-F]{24}$")
ID_COMMENT_PATTERN = re.compile(r"\b([0-9A-F]{24}) /\* (.*?) \*/")


class ProjectDecoder(OpenStepDecoder):
    """OpenStepDecoder that keeps the spelling of every string value next to its text."""

    @classmethod
    def ParseFromString(cls, text):
        return cls()._parse(text)

    def _parse_literal(self, text, index):
        index = self._parse_padding(text, index)
        value, next_index = super()._parse_literal(text, index)
        if text[index] != '"':
            return ParsedString(value, value), next_index
        # Same scan as the decoder: the closing quote is the first one not preceded by a backslash
        end = index + 1
        while text[end] != '"' or text[end - 1] == "\\":
            end += 1
        return ParsedString(value, text[index : end + 1]), next_index


def _is_id(value: Any, ids: Set[str]) -> bool:
    return isinstance(value, str) and (value in ids or bool(ID_PATTERN.match(value)))


def _convert(value: Any, ids: Set[str], comments: Dict[str, str]) -> Any:
    if isinstance(value, dict):
        return {key: _convert(item, ids, comments) for key, item in value.items()}
    if isinstance(value, list):
        return [
            Reference(XcodeID(item), comments.get(item))
            if _is_id(item, ids)
            else _convert(item, ids, comments)
            for item in value
        ]
    if _is_id(value, ids):
        return XcodeID(value)
    return value


# Comments are dropped by the parser, but references to objects that no longer
# exist can only be recognized by the comment written next to them.
def scan_comments(text: str) -> Dict[str, str]:
    comments: Dict[str, str] = {}
    for match in ID_COMMENT_PATTERN.finditer(text):
        comments.setdefault(match.group(1), match.group(2))
    return comments


def parse_document(text: str, project_name: Optional[str] = None) -> Document:
    tree = ProjectDecoder.ParseFromString(text)
    raw_objects = tree.get("objects") or {}
    ids = set(raw_objects.keys())
    comments = scan_comments(text)
    objects: Dict[str, Dict[str, Any]] = {}
    for object_id, raw in raw_objects.items():
        if not isinstance(raw, dict) or "isa" not in raw:
            continue
        obj = _convert(raw, ids, comments)
        objects.setdefault(str(raw["isa"]), {})[object_id] = obj
    root_object = tree.get("rootObject")
    document = Document(
        objects=objects,
        root_object=XcodeID(root_object) if root_object else None,
        archive_version=str(tree.get("archiveVersion", "1")),
        object_version=str(tree.get("objectVersion", "77")),
        classes=tree.get("classes") or {},
        project_name=project_name,
    )
    document.refresh_comments()
    return document


def project_file_path(path: Union[str, Path]) -> Path:
    """Accept either the project.pbxproj file or its enclosing .xcodeproj bundle."""
    path = Path(path)
    if path.suffix == ".xcodeproj":
        return path / "project.pbxproj"
    if path.suffix == ".pbxproj":
        return path
    raise ValueError(
        f"Expected a path to a .xcodeproj bundle or a .pbxproj file. Got '{path}' instead."
    )


def project_name_for(pbxproj_path: Path) -> str:
    bundle = pbxproj_path.parent
    if bundle.suffix == ".xcodeproj":
        return bundle.stem
    return bundle.name


def load_document(path: Union[str, Path]) -> Document:
    pbxproj_path = project_file_path(path)
    with open(pbxproj_path, "r", encoding="utf-8") as f:
        text = f.read()
    return parse_document(text, project_name=project_name_for(pbxproj_path))

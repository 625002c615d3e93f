"""
Xcode project file formatter.

This module converts a Document back into the text of a project.pbxproj file.
The layout follows what Xcode itself writes: tab indentation, one section per
object type, objects sorted by id, "isa" first and the remaining keys sorted,
build files and file references on a single line and every id annotated with
its comment. A document written by Xcode therefore round-trips unchanged.
"""

import re
from typing import Any, Dict, List, Optional

from sentry_wizard.apple.xcode.model import (
    Document,
    ParsedString,
    QuotedString,
    Reference,
    XcodeID,
    is_comment_key,
)

# Strings made only of these characters are written without quotes
UNQUOTED_STRING = re.compile(r"^[A-Za-z0-9_$/:.]+$")

# Escapes for quoted strings, other control characters use Xcode's \U notation
STRING_ESCAPES = {code: f"\\U{code:04x}" for code in range(0x20)}
STRING_ESCAPES.update({
    ord("\\"): "\\\\",
    ord('"'): '\\"',
    ord("\n"): "\\n",
    ord("\t"): "\\t",
})

# Object types Xcode writes on a single line
INLINE_TYPES = frozenset({"PBXBuildFile", "PBXFileReference"})

# Keys whose id values Xcode writes without a comment
UNCOMMENTED_KEYS = frozenset({"remoteGlobalIDString", "TestTargetID"})


def format_xcode_project(document: Document) -> str:
    """
    Convert a Document to its string representation.

    Args:
        document: The Document to format.

    Returns:
        A string containing the formatted Xcode project file content.
    """
    result = "// !$*UTF8*$!\n{\n"
    result += f"\tarchiveVersion = {format_string(str(document.archive_version))};\n"
    result += f"\tclasses = {format_dict(document, document.classes, 1)};\n"
    result += f"\tobjectVersion = {format_string(str(document.object_version))};\n"
    result += "\tobjects = {\n"
    for isa in sorted(document.objects):
        entries = sorted(document.entries(isa), key=lambda entry: entry[0])
        if not entries:
            continue
        result += f"\n/* Begin {isa} section */\n"
        for object_id, obj in entries:
            result += f"\t\t{format_id(document, object_id)} = {format_object(document, obj)};\n"
        result += f"/* End {isa} section */\n"
    result += "\t};\n"
    if document.root_object:
        result += f"\trootObject = {format_id(document, document.root_object)};\n"
    result += "}\n"
    return result


def format_object(document: Document, obj: Dict[str, Any]) -> str:
    if obj.get("isa") in INLINE_TYPES:
        return format_inline(document, obj)
    return format_dict(document, obj, 2)


def format_id(document: Document, object_id: str, fallback_comment: Optional[str] = None) -> str:
    comment = document.comment_for(object_id) or fallback_comment
    if comment:
        return f"{object_id} /* {comment} */"
    return object_id


def format_string(value: str) -> str:
    """
    Quote a string value when Xcode would.

    Values read from a file are written the way they were read, values set
    with their quotes already in place are written verbatim, and everything
    else is quoted and escaped unless it only contains safe characters.
    """
    if isinstance(value, QuotedString):
        return str(value)
    if isinstance(value, ParsedString) and value.token is not None:
        return value.token
    if UNQUOTED_STRING.match(value):
        return value
    return '"' + value.translate(STRING_ESCAPES) + '"'


def format_value(document: Document, value: Any, indent_level: int, key: Optional[str] = None) -> str:
    """
    Format a value based on its type.

    Args:
        document: The Document the value belongs to, used to look up comments.
        value: The value to format.
        indent_level: The current indentation level.
        key: The key the value is stored under, if any.

    Returns:
        A string representing the formatted value.
    """
    # Handle references inside lists
    if isinstance(value, Reference):
        return format_id(document, value.id, value.comment)

    # Handle scalar ids - not quoted, commented unless Xcode leaves them bare
    elif isinstance(value, XcodeID):
        if key in UNCOMMENTED_KEYS:
            return str(value)
        return format_id(document, value)

    elif isinstance(value, list):
        return format_list(document, value, indent_level)

    elif isinstance(value, dict):
        return format_dict(document, value, indent_level)

    # Xcode represents booleans as 0/1
    elif isinstance(value, bool):
        return "1" if value else "0"

    elif isinstance(value, (int, float)):
        return str(value)

    elif isinstance(value, str):
        return format_string(value)

    else:
        raise TypeError(f"Unsupported type: {type(value).__name__} for value: {value}")


def _sorted_keys(value_dict: Dict[str, Any]) -> List[str]:
    keys = [
        key
        for key, value in value_dict.items()
        if value is not None and not is_comment_key(key)
    ]
    return sorted(keys, key=lambda key: (key != "isa", key))


def format_dict(document: Document, value_dict: Dict[str, Any], indent_level: int) -> str:
    """
    Format a dictionary over multiple lines.

    Args:
        document: The Document the dictionary belongs to.
        value_dict: The dictionary to format.
        indent_level: The current indentation level.

    Returns:
        A string representing the formatted dictionary.
    """
    indent = "\t" * indent_level
    inner_indent = "\t" * (indent_level + 1)

    keys = _sorted_keys(value_dict)
    # Empty dictionaries should have braces on separate lines for Xcode compatibility
    if not keys:
        return "{\n" + indent + "}"

    result = "{\n"
    for key in keys:
        formatted_value = format_value(document, value_dict[key], indent_level + 1, key)
        result += f"{inner_indent}{format_string(key)} = {formatted_value};\n"
    result += f"{indent}}}"
    return result


def format_list(document: Document, value_list: List[Any], indent_level: int) -> str:
    indent = "\t" * indent_level
    inner_indent = "\t" * (indent_level + 1)

    result = "(\n"
    for item in value_list:
        result += f"{inner_indent}{format_value(document, item, indent_level + 1)},\n"
    result += f"{indent})"
    return result


def format_inline(document: Document, value: Any, key: Optional[str] = None) -> str:
    """Format a value on a single line, the way Xcode writes build files and file references."""
    if isinstance(value, dict):
        parts = "".join(
            f"{format_string(k)} = {format_inline(document, value[k], k)}; "
            for k in _sorted_keys(value)
        )
        return "{" + parts + "}"
    if isinstance(value, list):
        return "(" + "".join(f"{format_inline(document, item)}, " for item in value) + ")"
    return format_value(document, value, 0, key)

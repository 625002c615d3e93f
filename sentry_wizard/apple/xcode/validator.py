from typing import Any, List, Set

from sentry_wizard.apple.xcode.model import Document, Reference, XcodeID, is_comment_key


def collect_ids(document: Document) -> Set[str]:
    return {object_id for object_id, _ in document.all_objects()}


def validate_references(document: Document) -> List[str]:
    errors = []
    all_ids = collect_ids(document)

    def check_references(obj: Any, context: str):
        if isinstance(obj, Reference):
            if obj.id not in all_ids:
                errors.append(f"Invalid reference in {context}: {obj.id}")
        elif isinstance(obj, XcodeID):
            if obj not in all_ids:
                errors.append(f"Invalid reference in {context}: {obj}")
        elif isinstance(obj, list):
            for index, item in enumerate(obj):
                check_references(item, f"{context}[{index}]")
        elif isinstance(obj, dict):
            for key, value in obj.items():
                if not is_comment_key(key):
                    check_references(value, f"{context}.{key}")
        elif isinstance(obj, (str, int, float, type(None))):
            pass  # Plain values do not reference anything
        else:
            errors.append(f"Unknown type in {context}: {type(obj).__name__}")

    for object_id, obj in document.all_objects():
        check_references(obj, f"{obj.get('isa')}[{object_id}]")
    if document.root_object is not None and document.root_object not in all_ids:
        errors.append(f"Invalid reference in rootObject: {document.root_object}")

    return errors

# Swift Package Manager dependencies.

from typing import Optional

from sentry_wizard.apple.xcode.model import (
    Document,
    PBXObject,
    QuotedString,
    Reference,
    XcodeID,
    find_target,
    reference_list,
    repository_name,
    unquote,
)

SENTRY_COCOA_REPOSITORY_URL = "https://github.com/getsentry/sentry-cocoa/"
SENTRY_PRODUCT_NAME = "Sentry"
SENTRY_MINIMUM_VERSION = "8.0.0"


def is_product_linked(document: Document, product_name: str) -> bool:
    for _, phase in document.entries("PBXFrameworksBuildPhase"):
        for ref in reference_list(phase, "files"):
            if ref.comment and product_name in ref.comment:
                return True
    return False


def has_product_dependency(document: Document, target: PBXObject, product_name: str) -> bool:
    for ref in reference_list(target, "packageProductDependencies"):
        dependency = document.resolve("XCSwiftPackageProductDependency", ref.id)
        if dependency is not None and unquote(dependency.get("productName")) == product_name:
            return True
    return False


def frameworks_build_phase(document: Document, target: PBXObject) -> Optional[PBXObject]:
    for ref in reference_list(target, "buildPhases"):
        phase = document.resolve("PBXFrameworksBuildPhase", ref.id)
        if phase is not None:
            return phase
    return None


def add_package_dependency(
    document: Document,
    target_name: str,
    repository_url: str = SENTRY_COCOA_REPOSITORY_URL,
    product_name: str = SENTRY_PRODUCT_NAME,
    minimum_version: str = SENTRY_MINIMUM_VERSION,
) -> Optional[XcodeID]:
    """
    Add a remote Swift package and link one of its products into the target.

    Nothing is changed when the target does not exist or already links the
    product. Returns the id of the new product dependency.
    """
    found = find_target(document, target_name)
    if found is None:
        return None
    _, target = found
    if is_product_linked(document, product_name) or has_product_dependency(
        document, target, product_name
    ):
        return None

    package_id = document.generate_id()
    package_comment = f'XCRemoteSwiftPackageReference "{repository_name(repository_url)}"'
    document.add_object(
        package_id,
        {
            "isa": "XCRemoteSwiftPackageReference",
            "repositoryURL": QuotedString(f'"{unquote(repository_url)}"'),
            "requirement": {
                "kind": "upToNextMajorVersion",
                "minimumVersion": minimum_version,
            },
        },
        comment=package_comment,
    )

    dependency_id = document.generate_id()
    document.add_object(
        dependency_id,
        {
            "isa": "XCSwiftPackageProductDependency",
            "package": package_id,
            "productName": product_name,
        },
        comment=product_name,
    )
    if not isinstance(target.get("packageProductDependencies"), list):
        target["packageProductDependencies"] = []
    target["packageProductDependencies"].append(Reference(dependency_id, product_name))

    # Link the product and register the package with the project, as Xcode does
    phase = frameworks_build_phase(document, target)
    if phase is not None:
        build_file_id = document.generate_id()
        build_file_comment = f"{product_name} in Frameworks"
        document.add_object(
            build_file_id,
            {"isa": "PBXBuildFile", "productRef": dependency_id},
            comment=build_file_comment,
        )
        if not isinstance(phase.get("files"), list):
            phase["files"] = []
        phase["files"].append(Reference(build_file_id, build_file_comment))

    project = document.root_project()
    if project is not None:
        if not isinstance(project.get("packageReferences"), list):
            project["packageReferences"] = []
        project["packageReferences"].append(Reference(package_id, package_comment))

    return dependency_id

import sys
from pathlib import Path
from typing import Optional

from sentry_wizard import Config
from sentry_wizard.apple.xcode import XcodeProject
from sentry_wizard.react_native.gradle import patch_app_build_gradle

DEFAULT_APP_BUILD_GRADLE = Path("android") / "app" / "build.gradle"


def gradle_main(
    project: Optional[XcodeProject],
    config: Config,
    targets: list[str],
    command_args: list[str],
) -> int:
    assert not command_args

    # Positional arguments name the build.gradle files to patch
    build_gradle_paths = [Path(t) for t in targets] or [DEFAULT_APP_BUILD_GRADLE]
    for build_gradle in build_gradle_paths:
        if not build_gradle.is_file():
            print(f"ERROR: {build_gradle} not found", file=sys.stderr)
            return 1
        if patch_app_build_gradle(build_gradle):
            print(f"Added sentry.gradle to {build_gradle}")
        else:
            print(f"{build_gradle} already applies sentry.gradle or has no android block")
    return 0

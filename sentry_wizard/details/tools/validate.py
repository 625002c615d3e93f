import sys

from sentry_wizard import Config
from sentry_wizard.apple.xcode import XcodeProject


def validate_main(
    project: XcodeProject,
    config: Config,
    targets: list[str],
    command_args: list[str],
) -> int:
    assert not command_args

    errors = project.validate()
    for error in errors:
        print(error, file=sys.stderr)
    if errors:
        print(f"{project.path} : {len(errors)} invalid references", file=sys.stderr)
        return 1
    print(f"{project.path} : ok")
    return 0

from sentry_wizard import Config
from sentry_wizard.apple.xcode import XcodeProject


def targets_main(
    project: XcodeProject,
    config: Config,
    targets: list[str],
    command_args: list[str],
) -> int:
    assert not command_args

    for target_name in project.get_all_targets():
        if targets and target_name not in targets:
            continue
        print(target_name)
    return 0

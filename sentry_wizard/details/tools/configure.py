import sys
from argparse import ArgumentParser
from pathlib import Path

from sentry_wizard import Config
from sentry_wizard.apple.xcode import XcodeProject
from sentry_wizard.details.clirc import SENTRYCLIRC_FILENAME, add_sentry_cli_config, add_to_gitignore
from sentry_wizard.details.project_data import SentryProjectData


def configure_main(
    project: XcodeProject,
    config: Config,
    targets: list[str],
    command_args: list[str],
) -> int:
    # Parse configure-specific arguments
    parser = ArgumentParser(prog="sentry-wizard configure")
    parser.add_argument(
        "--spm",
        action="store_true",
        help="Add the sentry-cocoa Swift package to the targets",
    )
    parser.add_argument(
        "--no-upload-source",
        dest="upload_source",
        action="store_false",
        help="Upload debug symbols without source context",
    )
    args = parser.parse_args(command_args)

    try:
        project_data = SentryProjectData.from_config(config)
    except ValueError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    available_targets = project.get_all_targets()
    target_names = targets or available_targets
    if not target_names:
        print(f"ERROR: no targets found in {project.path}", file=sys.stderr)
        return 1
    for target_name in target_names:
        if target_name not in available_targets:
            print(f"ERROR: target {target_name} not found", file=sys.stderr)
            return 1

    for target_name in target_names:
        print(f"Configuring {target_name}...")
        project.update_xcode_project(
            project_data,
            target_name,
            add_spm_reference=args.spm,
            upload_source=args.upload_source,
        )
    print(f"Updated {project.path}")

    if config.auth_token:
        root = Path(project.base_dir)
        clirc_path = add_sentry_cli_config(root, config.auth_token)
        print(f"Wrote {clirc_path}")
        if add_to_gitignore(root, SENTRYCLIRC_FILENAME):
            print(f"Added {SENTRYCLIRC_FILENAME} to .gitignore")
    return 0

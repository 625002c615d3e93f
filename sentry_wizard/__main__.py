from argparse import ArgumentParser
import sys

from sentry_wizard import Config
from sentry_wizard.apple.xcode import XcodeProject
from sentry_wizard.details.tools.configure import configure_main
from sentry_wizard.details.tools.gradle import gradle_main
from sentry_wizard.details.tools.sources import sources_main
from sentry_wizard.details.tools.targets import targets_main
from sentry_wizard.details.tools.validate import validate_main

# Commands that don't operate on an Xcode project
PROJECTLESS_COMMANDS = {"gradle"}


def main(argv=None):
    COMMANDS = {
        "configure": configure_main,
        "gradle": gradle_main,
        "sources": sources_main,
        "targets": targets_main,
        "validate": validate_main,
    }
    # parse common arguments...
    parser = ArgumentParser(prog="sentry-wizard")
    parser.add_argument("command", choices=COMMANDS.keys())
    parser.add_argument("--project", type=str, help="Path to the .xcodeproj bundle or its project.pbxproj")
    parser.add_argument("--url", type=str, help="Sentry URL, defaults to SENTRY_URL")
    parser.add_argument("--org", type=str, help="Organization slug, defaults to SENTRY_ORG")
    parser.add_argument("--project-slug", dest="project_slug", type=str, help="Project slug, defaults to SENTRY_PROJECT")
    parser.add_argument("--auth-token", dest="auth_token", type=str, help="Auth token, defaults to SENTRY_AUTH_TOKEN")
    parser.add_argument("targets", default=[], nargs="*")
    # targets may follow the options, so positionals are collected from anywhere
    args, unknown_args = parser.parse_known_intermixed_args(sys.argv[1:] if argv is None else argv)

    config = Config.from_environment(
        url=args.url,
        org=args.org,
        project=args.project_slug,
        auth_token=args.auth_token,
    )
    # load the project the command works on...
    project = None
    if args.command not in PROJECTLESS_COMMANDS:
        if not args.project:
            print(f"ERROR: {args.command} command requires --project", file=sys.stderr)
            sys.exit(1)
        try:
            project = XcodeProject(args.project)
        except (ValueError, OSError) as e:
            print(f"ERROR: {e}", file=sys.stderr)
            sys.exit(1)
    # Pass project, config, and unknown args to the command
    exit_code = COMMANDS[args.command](
        project=project,
        config=config,
        targets=args.targets,
        command_args=unknown_args,
    )
    if exit_code is not None:
        sys.exit(exit_code)


if __name__ == "__main__":
    main()

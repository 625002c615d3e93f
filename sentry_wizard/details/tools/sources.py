import sys
from pathlib import Path

from sentry_wizard import Config
from sentry_wizard.apple.xcode import XcodeProject


def _count_lines(file_path: Path) -> int:
    try:
        with open(file_path, "r", encoding="utf-8", errors="ignore") as f:
            return sum(1 for _ in f)
    except OSError:
        # Files of SDKs that are not installed on this machine
        return 0


def _display_path(file_path: Path, root: Path) -> str:
    try:
        return str(file_path.relative_to(root))
    except ValueError:
        return str(file_path)


def sources_main(
    project: XcodeProject,
    config: Config,
    targets: list[str],
    command_args: list[str],
) -> int:
    assert not command_args

    target_names = targets or project.get_all_targets()
    root = Path(project.base_dir)
    total_loc = 0
    for target_name in target_names:
        files = project.get_source_files_for_target(target_name)
        if files is None:
            print(f"ERROR: target {target_name} not found", file=sys.stderr)
            return 1
        # Count all files once
        file_locs = {Path(f): _count_lines(Path(f)) for f in files}
        target_loc = sum(file_locs.values())
        total_loc += target_loc
        print(f"{target_name} : {target_loc:,} lines")
        for file_path, loc in file_locs.items():
            print(f"  {_display_path(file_path, root)} : {loc:,} lines")

    # Print total
    print(f"\nTotal : {total_loc:,} lines")
    return 0

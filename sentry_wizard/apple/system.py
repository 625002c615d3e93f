import os
import subprocess
from typing import List, Optional


def _run(args: List[str]) -> Optional[str]:
    try:
        result = subprocess.run(args, capture_output=True, text=True, check=False)
    except OSError:
        # xcrun / xcode-select are only available on macOS
        return None
    if result.returncode != 0:
        return None
    output = result.stdout.strip()
    return output or None


class MacOSSystemHelpers:
    """Queries the active Xcode installation. The standard Xcode environment variables take precedence."""

    @staticmethod
    def find_sdk_root_directory_path() -> Optional[str]:
        if sdk_root := os.environ.get("SDKROOT"):
            return sdk_root
        return _run(["xcrun", "--show-sdk-path"])

    @staticmethod
    def find_developer_directory_path() -> Optional[str]:
        if developer_dir := os.environ.get("DEVELOPER_DIR"):
            return developer_dir
        return _run(["xcode-select", "-p"])

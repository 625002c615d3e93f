from pathlib import Path
from typing import Union

SENTRYCLIRC_FILENAME = ".sentryclirc"
GITIGNORE_FILENAME = ".gitignore"


def add_sentry_cli_config(root: Union[str, Path], auth_token: str) -> Path:
    """Write the auth token sentry-cli reads at build time. The file must stay out of version control."""
    if not auth_token:
        raise ValueError("An auth token is required to configure sentry-cli")
    path = Path(root) / SENTRYCLIRC_FILENAME
    with open(path, "w", encoding="utf-8") as f:
        f.write(f"[auth]\ntoken={auth_token}\n")
    return path


def add_to_gitignore(root: Union[str, Path], entry: str = SENTRYCLIRC_FILENAME) -> bool:
    """Returns True when the entry was added, False when it was already present."""
    path = Path(root) / GITIGNORE_FILENAME
    content = ""
    if path.exists():
        with open(path, "r", encoding="utf-8") as f:
            content = f.read()
    if entry in (line.strip() for line in content.splitlines()):
        return False
    if content and not content.endswith("\n"):
        content += "\n"
    with open(path, "w", encoding="utf-8") as f:
        f.write(f"{content}{entry}\n")
    return True

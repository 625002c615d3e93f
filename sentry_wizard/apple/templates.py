HOMEBREW_PATH_SNIPPET = """
if [[ "$(uname -m)" == arm64 ]]; then
export PATH="/opt/homebrew/bin:$PATH"
fi"""


def get_run_script_template(
    org_slug: str,
    project_slug: str,
    upload_source: bool = True,
    include_homebrew_path: bool = False,
) -> str:
    """Shell script run by the upload build phase, uploads debug symbols with sentry-cli."""
    homebrew = HOMEBREW_PATH_SNIPPET if include_homebrew_path else ""
    include_sources = "--include-sources " if upload_source else ""
    return f"""# This script is responsible for uploading debug symbols and source context for Sentry.{homebrew}
if which sentry-cli >/dev/null; then
export SENTRY_ORG={org_slug}
export SENTRY_PROJECT={project_slug}
ERROR=$(sentry-cli debug-files upload {include_sources}"$DWARF_DSYM_FOLDER_PATH" 2>&1 >/dev/null)
if [ ! $? -eq 0 ]; then
echo "warning: sentry-cli - $ERROR"
fi
else
echo "warning: sentry-cli not installed, download from https://github.com/getsentry/sentry-cli/releases"
fi
"""

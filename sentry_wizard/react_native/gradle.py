import re
from pathlib import Path
from typing import Union

RN_SENTRY_GRADLE_PLUGIN = (
    'apply from: new File(["node", "--print", '
    "\"require.resolve('@sentry/react-native/package.json')\"]"
    '.execute().text.trim(), "../sentry.gradle")'
)

RN_SENTRY_GRADLE_PATTERN = re.compile(r"^\s*apply from:.*[\"'/]sentry\.gradle[\"']", re.MULTILINE)
ANDROID_BLOCK_PATTERN = re.compile(r"^android\s*\{", re.MULTILINE)


def does_app_build_gradle_include_rn_sentry_gradle_plugin(app_build_gradle: str) -> bool:
    return bool(RN_SENTRY_GRADLE_PATTERN.search(app_build_gradle))


def add_rn_sentry_gradle_plugin(app_build_gradle: str) -> str:
    """Apply the React Native sentry.gradle script right before the android block."""
    return ANDROID_BLOCK_PATTERN.sub(
        lambda match: RN_SENTRY_GRADLE_PLUGIN + "\n" + match.group(0),
        app_build_gradle,
        count=1,
    )


def patch_app_build_gradle(path: Union[str, Path]) -> bool:
    """Returns True when the file was changed."""
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        content = f.read()
    if does_app_build_gradle_include_rn_sentry_gradle_plugin(content):
        return False
    patched = add_rn_sentry_gradle_plugin(content)
    if patched == content:
        return False
    with open(path, "w", encoding="utf-8") as f:
        f.write(patched)
    return True

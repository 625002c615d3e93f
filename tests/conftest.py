import shutil
from pathlib import Path

import pytest

FIXTURES = Path(__file__).parent / "fixtures"

SDK_ROOT = "/Applications/Xcode.app/Contents/Developer/Platforms/MacOSX.platform/Developer/SDKs/MacOSX.sdk"
DEVELOPER_DIR = "/Applications/Xcode.app/Contents/Developer"


def fixture_project(name: str) -> Path:
    return FIXTURES / name / "Project.xcodeproj"


@pytest.fixture(autouse=True)
def xcode_environment(monkeypatch):
    # The Xcode location differs between machines, and xcrun is unavailable off macOS
    monkeypatch.setenv("SDKROOT", SDK_ROOT)
    monkeypatch.setenv("DEVELOPER_DIR", DEVELOPER_DIR)


@pytest.fixture
def copy_project(tmp_path):
    def _copy(name: str) -> Path:
        destination = tmp_path / "Project.xcodeproj"
        shutil.copytree(fixture_project(name), destination)
        return destination

    return _copy

import pytest

from builders import build_package, music_object

# Minimal Impulse Tracker header followed by padding
IT_PAYLOAD = b"IMPM" + b"Song01".ljust(26, b"\x00") + b"\x00" * 34

NAMES = ["None", "Music", "Core", "Class", "it", "Song01", "Engine", "Package"]


@pytest.fixture
def it_payload():
    return IT_PAYLOAD


@pytest.fixture
def music_package():
    """UT-style package with one Music export holding an IT module."""
    return build_package(
        NAMES,
        imports=[
            (2, 7, 0, 6),   # Core.Package Engine
            (2, 3, -1, 1),  # Core.Class Music, inside Engine
        ],
        exports=[(-2, 5, music_object(0, 4, IT_PAYLOAD))],
    )

"""
Payload type detection and output naming.

Music objects embed an ordinary tracker module; Sound objects embed a
sample file. The extractor names its output after the export and the
detected type.
"""

import os

MOD_TAGS = (
    b"M.K.", b"M!K!", b"M&K!", b"N.T.", b"FLT4", b"FLT8",
    b"4CHN", b"6CHN", b"8CHN", b"CD81", b"OKTA", b"OCTA",
)


def detect_format(data: bytes) -> str:
    """Return a file extension for the payload (``bin`` when unknown)."""
    if data[0:4] == b"IMPM":
        return "it"
    if data[0:17] == b"Extended Module: ":
        return "xm"
    if data[44:48] == b"SCRM":
        return "s3m"
    if data[0:4] == b"MT20":
        return "mt2"
    if data[0:3] == b"MO3":
        return "mo3"
    if data[0:4] == b"RIFF" and data[8:12] == b"WAVE":
        return "wav"
    if data[0:4] == b"OggS":
        return "ogg"
    if data[0:4] == b"fLaC":
        return "flac"
    if data[0:3] == b"ID3" or (len(data) >= 2 and data[0] == 0xFF and data[1] & 0xE0 == 0xE0):
        return "mp3"

    tag = data[1080:1084]
    if tag in MOD_TAGS or (tag[2:4] == b"CH" and tag[0:2].isdigit()):
        return "mod"

    return "bin"


def sanitize_filename(name: str) -> str:
    """Make an export name safe to use as a file name.

    Prevents directory traversal and strips characters that are invalid on
    common file systems.
    """
    name = name.replace("..", "_")
    name = name.replace("\\", "/")
    name = os.path.basename(name)

    bad_chars = '"<>|:*?\0\n\r\t'
    name = name.translate(str.maketrans(bad_chars, "_" * len(bad_chars)))

    name = name.strip().strip(".")
    return name or "unnamed"

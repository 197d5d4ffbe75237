# Copyright (c) 2025 Trae AI. All rights reserved.

from pathlib import Path
from typing import List

# Trailers live in a sub-folder next to the media file.
TRAILERS_FOLDER = "trailers"

# Uniform suffix for all trailer stubs.
TRAILER_FILE_SUFFIX = "-Trailer.strm"

IGNORE_MARKER = ".ignore"


def trailers_dir_for(container_path: Path) -> Path:
    return Path(container_path) / TRAILERS_FOLDER


def is_ignored(trailers_dir: Path) -> bool:
    return (trailers_dir / IGNORE_MARKER).is_file()


def first_token(name: str) -> str:
    tokens = name.split()
    return tokens[0] if tokens else ""


def stub_path_for(trailers_dir: Path, item_name: str) -> Path:
    """
    Path of the stub for an item, e.g. "Foo Bar" -> trailers/Foo-Trailer.strm
    """
    return trailers_dir / f"{first_token(item_name)}{TRAILER_FILE_SUFFIX}"


def delete_stubs(trailers_dir: Path) -> List[Path]:
    """
    Deletes every *-Trailer.strm file directly inside trailers_dir.
    Returns the deleted paths.
    """
    deleted = []
    for path in sorted(trailers_dir.glob(f"*{TRAILER_FILE_SUFFIX}")):
        if path.is_file():
            path.unlink()
            deleted.append(path)
    return deleted


def delete_dir_if_empty(path: Path) -> bool:
    if any(path.iterdir()):
        return False
    path.rmdir()
    return True


def write_stub(stub_path: Path, url: str):
    # UTF-8 without BOM, no newline translation
    with open(stub_path, "w", encoding="utf-8", newline="") as f:
        f.write(url)

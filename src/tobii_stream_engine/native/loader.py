import ctypes
import ctypes.util
import logging
import os
import sys
from pathlib import Path
from typing import Iterator, Optional

from ..errors import LibraryNotFound
from .library import NativeLibrary

logger = logging.getLogger(__name__)

LIBRARY_NAME = "tobii_stream_engine"

# One library per process; its version is frozen when it is first loaded.
_library: Optional[NativeLibrary] = None


def _candidates(path: Optional[Path]) -> Iterator[str]:
    if path is not None:
        yield str(path)

    found = ctypes.util.find_library(LIBRARY_NAME)
    if found:
        yield found

    if sys.platform == "win32":
        program_files = os.environ.get("ProgramFiles", r"C:\Program Files")
        yield str(Path(program_files) / "Tobii" / "Tobii EyeX" / f"{LIBRARY_NAME}.dll")
        yield f"{LIBRARY_NAME}.dll"
    elif sys.platform == "darwin":
        yield f"lib{LIBRARY_NAME}.dylib"
    else:
        yield f"lib{LIBRARY_NAME}.so"
        yield f"/usr/lib/tobii/lib{LIBRARY_NAME}.so"


def load_library(path: Optional[Path] = None, settings=None) -> NativeLibrary:
    """
    Loads the native library and freezes its version for the process.

    Later calls return the cached instance and ignore their arguments.
    """
    global _library

    if _library is not None:
        return _library

    if path is None and settings is not None:
        path = settings.library_path

    tried = []
    for candidate in _candidates(path):
        try:
            cdll = ctypes.CDLL(candidate)
        except OSError as e:
            tried.append(f"{candidate} ({e})")
            continue
        logger.info("Loaded native library from %s", candidate)
        _library = NativeLibrary(cdll)
        return _library

    raise LibraryNotFound(
        "Could not load the stream engine library. Set TOBII__LIBRARY_PATH. Tried: "
        + "; ".join(tried)
    )


def loaded_library() -> Optional[NativeLibrary]:
    return _library

import ctypes
from dataclasses import dataclass

from .errors import IntegrityError, StreamEngineError, raise_for_status


@dataclass(slots=True, frozen=True, order=True)
class Version:
    """
    Version of the loaded native library.

    Read once when the library is loaded. Every version-dependent call shape
    and struct layout is chosen from `major`.
    """
    major: int
    minor: int
    revision: int
    build: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.revision}.{self.build}"


def resolve_version(lib) -> Version:
    """Asks the native library for its version. Raises IntegrityError on failure."""
    from .native.structs import VersionStruct

    raw = VersionStruct()
    code = lib.tobii_get_api_version(ctypes.pointer(raw))
    try:
        raise_for_status(code, "tobii_get_api_version failed")
    except StreamEngineError as e:
        raise IntegrityError("Native library did not report its version.", code) from e

    return Version(raw.major, raw.minor, raw.revision, raw.build)

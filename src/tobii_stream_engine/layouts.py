from dataclasses import dataclass

from .errors import InvalidArgument
from .models.device import DeviceInfo


@dataclass(slots=True, frozen=True)
class FieldSpec:
    name: str
    offset: int
    length: int


@dataclass(slots=True, frozen=True)
class DeviceInfoLayout:
    """Byte layout of `tobii_device_info_t` for one family of library versions."""
    size: int
    fields: tuple[FieldSpec, ...]


DEVICE_INFO_V2 = DeviceInfoLayout(
    size=384,
    fields=(
        FieldSpec("serial_number", 0x000, 128),
        FieldSpec("model", 0x080, 64),
        FieldSpec("generation", 0x0C0, 64),
        FieldSpec("firmware_version", 0x100, 128),
    ),
)

DEVICE_INFO_V3 = DeviceInfoLayout(
    size=2048,
    fields=(
        FieldSpec("serial_number", 0x000, 256),
        FieldSpec("model", 0x100, 256),
        FieldSpec("generation", 0x200, 256),
        FieldSpec("firmware_version", 0x300, 256),
        FieldSpec("integration_id", 0x400, 128),
        FieldSpec("hw_calibration_version", 0x480, 128),
        FieldSpec("hw_calibration_date", 0x500, 128),
        FieldSpec("lot_id", 0x580, 128),
        FieldSpec("integration_type", 0x600, 256),
        FieldSpec("runtime_build_version", 0x700, 256),
    ),
)


def _c_string(raw: bytes) -> str:
    return raw.split(b"\0", 1)[0].decode("utf-8", errors="replace")


def decode_device_info(layout: DeviceInfoLayout, raw: bytes) -> DeviceInfo:
    """Decodes a raw device info block. Fields missing from the layout stay None."""
    if len(raw) < layout.size:
        raise InvalidArgument(
            f"Device info block is {len(raw)} bytes, layout needs {layout.size}."
        )
    values = {
        f.name: _c_string(raw[f.offset:f.offset + f.length]) for f in layout.fields
    }
    return DeviceInfo(**values)


def encode_device_info(layout: DeviceInfoLayout, info: DeviceInfo) -> bytes:
    """Builds a raw block in the native layout. Used by test doubles and tooling."""
    buf = bytearray(layout.size)
    for f in layout.fields:
        value = (getattr(info, f.name) or "").encode("utf-8")[: f.length - 1]
        buf[f.offset:f.offset + len(value)] = value
    return bytes(buf)

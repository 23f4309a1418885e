"""
Preset Byte Stream

Little-endian reader and writer for the Phase Plant preset format. These
handle the primitive fields (integers, floats, booleans, length prefixed
strings, paths, metadata, data block headers) and the sentinel checks used
to detect format drift.
"""

import json
import logging
import struct
from dataclasses import dataclass
from typing import List, Optional, Type

from .errors import PhasePlantError, RangeError, SentinelMismatchError, ShortReadError
from .values import CurvePoint, CurvePointMode, Decibels, Envelope, Metadata, WireEnum
from .version import PhasePlantRelease, Version

logger = logging.getLogger(__name__)


# ==============================================================================
# Constants
# ==============================================================================

STRING_LENGTH_MAX = 1024
PATH_COMPONENT_COUNT_MAX = 100
METADATA_LENGTH_MAX = 64 * 1024
CURVE_POINT_SIZE = 5 * 4

_U8 = struct.Struct('<B')
_U16 = struct.Struct('<H')
_U32 = struct.Struct('<I')
_I32 = struct.Struct('<i')
_F32 = struct.Struct('<f')


@dataclass
class DataBlockHeader:
    """Header in front of variable length data blocks.

    data_length excludes the length word, the used flag and the mode id.
    """
    data_length: int = 0
    is_used: bool = False
    mode_id: Optional[int] = None

    @classmethod
    def unused(cls) -> 'DataBlockHeader':
        return cls(0, False, None)


# ==============================================================================
# Reader
# ==============================================================================

class PresetReader:
    """Cursor over the bytes of a preset."""

    def __init__(self, data: bytes, format_version: Optional[Version] = None):
        self.data = bytes(data)
        self.pos = 0
        self.format_version = format_version or Version()

    # --- Position -------------------------------------------------------------

    def remaining(self) -> int:
        return len(self.data) - self.pos

    def seek(self, pos: int):
        if pos < 0 or pos > len(self.data):
            raise ShortReadError(f"Cannot seek to {pos}, stream length is {len(self.data)}")
        self.pos = pos

    def skip(self, count: int):
        self.seek(self.pos + count)

    def is_release_at_least(self, release: PhasePlantRelease) -> bool:
        return self.format_version >= release.format_version

    def is_version_at_least_2_0(self) -> bool:
        return self.is_release_at_least(PhasePlantRelease.V2_0_0)

    def is_version_at_least_2_1(self) -> bool:
        return self.is_release_at_least(PhasePlantRelease.V2_1_0)

    # --- Scalars --------------------------------------------------------------

    def read_bytes(self, count: int) -> bytes:
        end = self.pos + count
        if count < 0 or end > len(self.data):
            raise ShortReadError(
                f"Needed {count} bytes but only {self.remaining()} remain at position {self.pos}")
        chunk = self.data[self.pos:end]
        self.pos = end
        return chunk

    def _unpack(self, fmt: struct.Struct):
        return fmt.unpack(self.read_bytes(fmt.size))[0]

    def read_u8(self) -> int:
        return self._unpack(_U8)

    def read_u16(self) -> int:
        return self._unpack(_U16)

    def read_u32(self) -> int:
        return self._unpack(_U32)

    def read_i32(self) -> int:
        return self._unpack(_I32)

    def read_f32(self) -> float:
        return self._unpack(_F32)

    def read_bool8(self) -> bool:
        return self.read_u8() != 0

    def read_bool32(self) -> bool:
        return self.read_u32() != 0

    def read_decibels_db(self) -> Decibels:
        return Decibels(self.read_f32())

    def read_decibels_linear(self) -> Decibels:
        return Decibels.from_linear(self.read_f32())

    def read_group_id(self) -> Optional[int]:
        """Snapin group membership, zero when not grouped."""
        value = self.read_u32()
        return value or None

    def read_enum(self, enum_cls: Type[WireEnum], value: Optional[int] = None) -> WireEnum:
        start = self.pos
        if value is None:
            value = self.read_u32()
        try:
            return enum_cls.from_id(value)
        except PhasePlantError as e:
            raise type(e)(f"{e} at position {start}") from None

    # --- Sentinels ------------------------------------------------------------

    def _mismatch(self, name: str, expected, actual, size: int):
        raise SentinelMismatchError(
            f"Value {actual!r} is not the expected value of {expected!r} for {name} "
            f"at position {self.pos - size}")

    def expect_u8(self, expected: int, name: str):
        value = self.read_u8()
        if value != expected:
            self._mismatch(name, expected, value, 1)

    def expect_u32(self, expected: int, name: str):
        value = self.read_u32()
        if value != expected:
            self._mismatch(name, expected, value, 4)

    def expect_f32(self, expected: float, name: str):
        value = self.read_f32()
        if value != expected:
            self._mismatch(name, expected, value, 4)

    def expect_bool32(self, expected: bool, name: str):
        # Both states have been seen in the wild, anything else is drift
        value = self.read_u32()
        if value not in (0, 1):
            self._mismatch(name, expected, value, 4)

    # --- Composite ------------------------------------------------------------

    def read_string(self) -> Optional[str]:
        """Length prefixed UTF-8 text. A zero length means no string."""
        start = self.pos
        length = self.read_u32()
        if length > STRING_LENGTH_MAX:
            raise RangeError(
                f"Text length of {length} exceeds {STRING_LENGTH_MAX} characters at position {start}")
        if length == 0:
            return None
        raw = self.read_bytes(length)
        try:
            return raw.decode('utf-8')
        except UnicodeDecodeError as e:
            raise PhasePlantError(f"Cannot decode text at position {start + 4}: {e}") from None

    def read_path(self) -> List[str]:
        start = self.pos
        count = self.read_u32()
        if count > PATH_COMPONENT_COUNT_MAX:
            raise RangeError(
                f"Path component count of {count} exceeds {PATH_COMPONENT_COUNT_MAX} at position {start}")
        return [self.read_string() or '' for _ in range(count)]

    def read_metadata(self) -> Metadata:
        start = self.pos
        length = self.read_u32()
        if length > METADATA_LENGTH_MAX:
            raise RangeError(f"Metadata length of {length} is too large at position {start}")
        if length == 0:
            return Metadata()
        flag = self.read_u8()
        if flag != 0:
            logger.warning("Unexpected metadata flag %d at position %d", flag, start + 4)
        raw = self.read_bytes(length - 1)
        try:
            document = json.loads(raw.decode('utf-8')) if raw.strip() else {}
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise PhasePlantError(f"Invalid metadata JSON at position {start + 5}: {e}") from None
        if not isinstance(document, dict):
            raise PhasePlantError(f"Metadata is not a JSON object at position {start + 5}")
        return Metadata(author=_trimmed(document.get('author')),
                        description=_trimmed(document.get('description')))

    def read_block_header(self) -> DataBlockHeader:
        start = self.pos
        length = self.read_u32()
        if length == 0:
            raise PhasePlantError(f"Data block header had zero length at position {start}")
        is_used = self.read_bool8()
        mode_id = self.read_u32() if is_used else None
        data_length = length - (5 if is_used else 1)
        if data_length < 0:
            raise RangeError(f"Data block length {length} is too short at position {start}")
        return DataBlockHeader(data_length, is_used, mode_id)

    def read_envelope(self) -> Envelope:
        return Envelope(*(self.read_f32() for _ in range(9)))

    def read_curve_points(self) -> List[CurvePoint]:
        """Point count followed by the points, kept in file order."""
        count = self.read_u32()
        if count * CURVE_POINT_SIZE > self.remaining():
            raise ShortReadError(f"Curve of {count} points overruns the stream at position {self.pos - 4}")
        points = []
        for _ in range(count):
            x = self.read_f32()
            y = self.read_f32()
            curve_x = self.read_f32()
            curve_y = self.read_f32()
            mode = self.read_enum(CurvePointMode)
            points.append(CurvePoint(x, y, curve_x, curve_y, mode))
        return points


def _trimmed(value) -> Optional[str]:
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


# ==============================================================================
# Writer
# ==============================================================================

class PresetWriter:
    """Accumulates the bytes of a preset in memory."""

    def __init__(self):
        self.buffer = bytearray()

    @property
    def pos(self) -> int:
        return len(self.buffer)

    def getvalue(self) -> bytes:
        return bytes(self.buffer)

    def _pack(self, fmt: struct.Struct, value, name: str):
        try:
            self.buffer += fmt.pack(value)
        except (struct.error, OverflowError) as e:
            raise PhasePlantError(f"Cannot write {name} value {value!r}: {e}") from None

    def write_bytes(self, data: bytes):
        self.buffer += data

    def write_zeros(self, count: int):
        self.buffer += bytes(count)

    def write_u8(self, value: int):
        self._pack(_U8, value, 'u8')

    def write_u16(self, value: int):
        self._pack(_U16, value, 'u16')

    def write_u32(self, value: int):
        self._pack(_U32, value, 'u32')

    def write_i32(self, value: int):
        self._pack(_I32, value, 'i32')

    def write_f32(self, value: float):
        self._pack(_F32, value, 'f32')

    def write_bool8(self, value: bool):
        self.write_u8(1 if value else 0)

    def write_bool32(self, value: bool):
        self.write_u32(1 if value else 0)

    def write_decibels_db(self, value: Decibels):
        self.write_f32(value.db)

    def write_decibels_linear(self, value: Decibels):
        self.write_f32(value.linear)

    def write_group_id(self, group_id: Optional[int]):
        self.write_u32(group_id or 0)

    def write_enum(self, value: WireEnum):
        self.write_u32(value.value)

    def write_string(self, value: Optional[str]):
        if value is None:
            self.write_u32(0)
            return
        raw = value.encode('utf-8')
        if len(raw) > STRING_LENGTH_MAX:
            raise RangeError(f"Text length of {len(raw)} exceeds {STRING_LENGTH_MAX} characters")
        self.write_u32(len(raw))
        self.write_bytes(raw)

    def write_path(self, components: List[str]):
        if len(components) > PATH_COMPONENT_COUNT_MAX:
            raise RangeError(
                f"Path component count of {len(components)} exceeds {PATH_COMPONENT_COUNT_MAX}")
        self.write_u32(len(components))
        for component in components:
            self.write_string(component)

    def write_metadata(self, metadata: Metadata):
        # Same layout Phase Plant produces so files diff cleanly
        document = {
            'description': metadata.description or '',
            'author': metadata.author or '',
        }
        raw = (json.dumps(document, indent=4, ensure_ascii=False) + '\n').encode('utf-8')
        if len(raw) + 1 > METADATA_LENGTH_MAX:
            raise RangeError(f"Metadata length of {len(raw) + 1} is too large")
        self.write_u32(len(raw) + 1)
        self.write_u8(0)
        self.write_bytes(raw)

    def write_block_header(self, header: DataBlockHeader):
        if header.is_used:
            self.write_u32(header.data_length + 5)
            self.write_bool8(True)
            self.write_u32(header.mode_id or 0)
        else:
            self.write_u32(header.data_length + 1)
            self.write_bool8(False)

    def write_data_block(self, mode_id: int, data: bytes):
        self.write_block_header(DataBlockHeader(len(data), True, mode_id))
        self.write_bytes(data)

    def write_unused_block(self):
        self.write_block_header(DataBlockHeader.unused())

    def write_envelope(self, envelope: Envelope):
        for value in (envelope.delay, envelope.attack, envelope.attack_curve,
                      envelope.hold, envelope.decay, envelope.decay_falloff,
                      envelope.sustain, envelope.release, envelope.release_falloff):
            self.write_f32(value)

    def write_curve_points(self, points: List[CurvePoint]):
        self.write_u32(len(points))
        for point in points:
            self.write_f32(point.x)
            self.write_f32(point.y)
            self.write_f32(point.curve_x)
            self.write_f32(point.curve_y)
            self.write_enum(point.mode)

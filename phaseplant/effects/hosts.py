"""
Host Effects

Slice EQ, Carve EQ, Multipass and Snap Heap. These carry a header of their
own in front of the parameters, sized by a length word or by the effect
version. Regions whose meaning is unknown are kept as raw bytes and written
back unchanged, so a host effect is always written with the layout of the
version it was read at.
"""

import logging
import struct
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import numpy as np

from ..errors import RangeError
from ..stream import PresetReader, PresetWriter
from ..values import (Decibels, FalloffSpeed, FrequencyResolution, SpectrumView,
                      StereoMode, WireEnum)
from ..version import PhasePlantRelease, Version
from .base import Effect, EffectMode, register_effect, result

logger = logging.getLogger(__name__)


class HostEffect(Effect):
    """Host effect written back in the layout it was read with.

    ``read_version`` is None for instances created in code, which are
    written at ``WRITE_VERSION``.
    """
    read_version: Optional[int]

    def write_version(self) -> int:
        if self.read_version is not None:
            return self.read_version
        return self.WRITE_VERSION


# ==============================================================================
# Carve EQ
# ==============================================================================

BAND_COUNT = 31
CHANNEL_COUNT = 2


def flat_shape() -> np.ndarray:
    return np.zeros((CHANNEL_COUNT, BAND_COUNT), dtype=np.float32)


def _carve_eq_header(effect_version: int) -> bytes:
    """Header Phase Plant writes for a new Carve EQ."""
    writer = PresetWriter()
    # Version B as major, patch, minor
    writer.write_u32(6)
    writer.write_u32(0)
    writer.write_u32(0)
    writer.write_string('\0')
    writer.write_u32(0)
    writer.write_f32(1.0)
    writer.write_bool32(True)
    writer.write_zeros(124)
    writer.write_bool32(True)
    writer.write_zeros(128)
    writer.write_u32(0)
    if effect_version > 1022:
        writer.write_u32(0)
        writer.write_u32(0)
    return writer.getvalue()


@register_effect
@dataclass
class CarveEq(HostEffect):
    """31 band equalizer.

    ``shape`` holds one row of band gains per channel. The spectrum view has
    no zoom on the X axis, so x_min and x_max stay at zero.
    """
    mode = EffectMode.CARVE_EQ
    MIN_VERSION = 1022
    WRITE_VERSION = 1034

    MIN_Y = -31.5
    MAX_Y = 31.5

    gain: Decibels = Decibels.ZERO
    mix: float = 1.0
    stereo_mode: StereoMode = StereoMode.MID_SIDE
    spectrum_view: SpectrumView = field(
        default_factory=lambda: SpectrumView(x_min=0.0, x_max=0.0))
    shape: np.ndarray = field(default_factory=flat_shape)
    header: Optional[bytes] = field(default=None, repr=False)
    view_unknown: int = 0
    trailer: bytes = field(default=bytes(20), repr=False)
    read_version: Optional[int] = None

    def __eq__(self, other):
        if not isinstance(other, CarveEq):
            return NotImplemented
        return (self.gain == other.gain and self.mix == other.mix
                and self.stereo_mode == other.stereo_mode
                and self.spectrum_view == other.spectrum_view
                and np.array_equal(self.shape, other.shape)
                and self.header == other.header
                and self.view_unknown == other.view_unknown
                and self.trailer == other.trailer)

    @property
    def version_b(self) -> Version:
        major, patch, minor = struct.unpack_from('<III', self._header())
        return Version(major, minor, patch)

    def _header(self) -> bytes:
        if self.header is not None:
            return self.header
        return _carve_eq_header(self.write_version())

    @classmethod
    def read(cls, reader, effect_version):
        cls.check_version(effect_version)
        header_length = reader.read_u32()
        header_start = reader.pos
        version_b_major = reader.read_u32()
        reader.skip(8)
        # Leading NULL string, kept as part of the header
        reader.read_string()
        reader.expect_u32(0, 'carve_eq_unknown1')
        reader.expect_f32(1.0, 'carve_eq_unknown2')
        reader.expect_bool32(True, 'carve_eq_unknown3')
        for index in range(124):
            reader.expect_u8(0, f'carve_eq_unknown4_{index}')
        reader.expect_bool32(True, 'carve_eq_unknown5')
        for index in range(128):
            reader.expect_u8(0, f'carve_eq_unknown6_{index}')
        reader.expect_u32(0, 'carve_eq_unknown7')
        if effect_version > 1022:
            reader.skip(4)
            reader.expect_u32(0, 'carve_eq_unknown9')
        header_remaining = header_length - (reader.pos - header_start)
        logger.debug("Carve EQ header has %d bytes remaining", header_remaining)
        reader.seek(header_start)
        header = reader.read_bytes(header_length)

        preset_name = reader.read_string()
        preset_path = reader.read_path() if version_b_major > 5 else []
        preset_edited = reader.read_bool32()
        reader.expect_u8(0, 'carve_eq_path1')

        effect = cls(header=header, read_version=effect_version)
        effect.mix = reader.read_f32()
        enabled = reader.read_bool32()
        minimized = reader.read_bool32()
        effect.shape = flat_shape()
        effect.shape[0] = [reader.read_f32() for _ in range(BAND_COUNT)]
        effect.stereo_mode = reader.read_enum(StereoMode)
        view = SpectrumView(x_min=0.0, x_max=0.0)
        view.falloff_speed = reader.read_enum(FalloffSpeed)
        view.frequency_resolution = reader.read_enum(FrequencyResolution)
        effect.view_unknown = reader.read_u32()
        effect.gain = reader.read_decibels_db()
        effect.shape[1] = [reader.read_f32() for _ in range(BAND_COUNT)]
        effect.trailer = reader.read_bytes(20)
        if effect_version > 1022:
            # Zoom and pan arrived in Phase Plant 1.8.14
            view.y_min = reader.read_decibels_db()
            view.y_max = reader.read_decibels_db()
            view.x_min = reader.read_f32()
            view.x_max = reader.read_f32()
            view = view.normalize()
        effect.spectrum_view = view
        reader.expect_u32(0, 'carve_eq_unknown22')
        if effect_version < 1023:
            reader.expect_u32(0, 'carve_eq_unknown23')
            reader.expect_u32(0, 'carve_eq_unknown24')
        elif effect_version >= 1034:
            reader.expect_u32(0, 'carve_eq_unknown23')
        return result(effect, enabled, minimized, preset_name=preset_name,
                      preset_path=preset_path, preset_edited=preset_edited)

    def write(self, writer, snapin):
        version = self.write_version()
        header = self._header()
        writer.write_u32(len(header))
        writer.write_bytes(header)
        writer.write_string(snapin.preset_name)
        if self.version_b.major > 5:
            writer.write_path(snapin.preset_path)
        writer.write_bool32(snapin.preset_edited)
        writer.write_u8(0)
        writer.write_f32(self.mix)
        writer.write_bool32(snapin.enabled)
        writer.write_bool32(snapin.minimized)
        for value in self.shape[0]:
            writer.write_f32(float(value))
        writer.write_enum(self.stereo_mode)
        writer.write_enum(self.spectrum_view.falloff_speed)
        writer.write_enum(self.spectrum_view.frequency_resolution)
        writer.write_u32(self.view_unknown)
        writer.write_decibels_db(self.gain)
        for value in self.shape[1]:
            writer.write_f32(float(value))
        writer.write_bytes(self.trailer)
        if version > 1022:
            writer.write_decibels_db(self.spectrum_view.y_min)
            writer.write_decibels_db(self.spectrum_view.y_max)
            writer.write_f32(self.spectrum_view.x_min)
            writer.write_f32(self.spectrum_view.x_max)
        writer.write_u32(0)
        if version < 1023:
            writer.write_u32(0)
            writer.write_u32(0)
        elif version >= 1034:
            writer.write_u32(0)


# ==============================================================================
# Slice EQ
# ==============================================================================

class OversampleMode(WireEnum):
    OFF = 0
    TIMES_TWO = 1
    AUTO = 2

    @property
    def label(self) -> str:
        return '2X' if self is OversampleMode.TIMES_TWO else super().label


class ChannelMode(WireEnum):
    BOTH = 0
    MID = 1
    SIDE = 2


class SliceEqFilterMode(WireEnum):
    HIGH_CUT = 0
    LOW_CUT = 1
    NOTCH = 2
    LOW_SHELF = 3
    PEAK = 4
    HIGH_SHELF = 5

    @property
    def label(self) -> str:
        return self.name.replace('_', ' ').capitalize()


@dataclass
class SliceEqFilter:
    """One band of a Slice EQ.

    ``order`` indexes ORDER_TO_DB_PER_OCTAVE and only matters for the cut
    filters.
    """
    RESONANCE_MIN = 0.025
    RESONANCE_MAX = 40.0
    ID_WHEN_DELETED = 99
    ORDER_TO_DB_PER_OCTAVE = [6, 12, 18, 24, 36, 48, 72, 96]

    id: int = 1
    channel_mode: ChannelMode = ChannelMode.BOTH
    filter_mode: SliceEqFilterMode = SliceEqFilterMode.LOW_CUT
    enabled: bool = False
    cutoff_frequency: float = 440.0
    gain: Decibels = Decibels.ZERO
    q: float = 0.5
    order: int = 0

    @property
    def db_per_octave(self) -> int:
        return self.ORDER_TO_DB_PER_OCTAVE[self.order]

    @classmethod
    def deleted(cls) -> 'SliceEqFilter':
        return cls(id=cls.ID_WHEN_DELETED)


SLICE_EQ_HEADER_LENGTH = 1218
SLICE_EQ_HEADER_UNKNOWN = 1194
SLICE_EQ_HEADER_EXTRA = 8


@register_effect
@dataclass
class SliceEq(HostEffect):
    """Up to 32 band equalizer.

    The file always holds 32 filter slots. Slots that are not in use are
    left out of ``filters`` and their stored fields are kept in
    ``empty_slots`` by slot index. The channel modes of the first seven
    slots live in a block after the eighth slot.
    """
    mode = EffectMode.SLICE_EQ
    MIN_VERSION = 1019
    WRITE_VERSION = 1032

    FILTER_COUNT_MAX = 32

    filters: List[SliceEqFilter] = field(default_factory=list)
    offset_semitones: float = 0.0
    gain: Decibels = Decibels.ZERO
    mix: float = 1.0
    edit_mode: ChannelMode = ChannelMode.BOTH
    stereo_mode: StereoMode = StereoMode.MID_SIDE
    oversample_mode: OversampleMode = OversampleMode.AUTO
    spectrum_view: SpectrumView = field(default_factory=SpectrumView)
    empty_slots: Dict[int, SliceEqFilter] = field(default_factory=dict, repr=False)
    header_length: int = field(default=SLICE_EQ_HEADER_LENGTH, repr=False)
    version_a_major: int = field(default=6, repr=False)
    version_b: Version = field(default_factory=Version, repr=False)
    header: Optional[bytes] = field(default=None, repr=False)
    header_flag: int = field(default=0, repr=False)
    read_version: Optional[int] = None

    def _slots(self) -> List[Optional[SliceEqFilter]]:
        """Filters by slot index, None for an empty slot."""
        if len(self.filters) > self.FILTER_COUNT_MAX:
            raise RangeError(
                f"Slice EQ holds at most {self.FILTER_COUNT_MAX} filters, not {len(self.filters)}")
        open_slots = [index for index in range(self.FILTER_COUNT_MAX)
                      if index not in self.empty_slots]
        missing = len(self.filters) - len(open_slots)
        if missing > 0:
            # Added filters claim empty slots, those after the last filter first
            last = open_slots[-1] if open_slots else -1
            reserved = sorted(index for index in self.empty_slots
                              if 0 <= index < self.FILTER_COUNT_MAX)
            claimed = [i for i in reserved if i > last] + [i for i in reserved if i <= last]
            open_slots = sorted(open_slots + claimed[:missing])
        slots: List[Optional[SliceEqFilter]] = [None] * self.FILTER_COUNT_MAX
        for index, eq_filter in zip(open_slots, self.filters):
            slots[index] = eq_filter
        return slots

    @classmethod
    def _read_filter(cls, reader, index: int):
        exists = reader.read_bool32()
        enabled = reader.read_bool32()
        filter_id = reader.read_u32()
        filter_mode = reader.read_enum(SliceEqFilterMode)
        order_pos = reader.pos
        order = reader.read_u32()
        if order >= len(SliceEqFilter.ORDER_TO_DB_PER_OCTAVE):
            raise RangeError(
                f"Filter order {order} for filter index {index} is out of range "
                f"at position {order_pos}")
        cutoff = reader.read_f32()
        q = reader.read_f32()
        gain = reader.read_decibels_db()
        return exists, SliceEqFilter(filter_id, ChannelMode.BOTH, filter_mode, enabled,
                                     cutoff, gain, q, order)

    @staticmethod
    def _write_filter(writer, exists: bool, eq_filter: SliceEqFilter):
        writer.write_bool32(exists)
        writer.write_bool32(eq_filter.enabled)
        writer.write_u32(eq_filter.id)
        writer.write_enum(eq_filter.filter_mode)
        writer.write_u32(eq_filter.order)
        writer.write_f32(eq_filter.cutoff_frequency)
        writer.write_f32(eq_filter.q)
        writer.write_decibels_db(eq_filter.gain)

    @classmethod
    def read(cls, reader, effect_version):
        cls.check_version(effect_version)
        effect = cls(read_version=effect_version)
        effect.header_length = reader.read_u32()
        effect.version_a_major = reader.read_u32()
        patch = reader.read_u32()
        minor = reader.read_u32()
        major = reader.read_u32()
        effect.version_b = Version(major, minor, patch)
        header_size = SLICE_EQ_HEADER_UNKNOWN
        if effect_version >= 1020:
            header_size += SLICE_EQ_HEADER_EXTRA
        effect.header = reader.read_bytes(header_size)

        preset_name = reader.read_string()
        preset_path = reader.read_path()
        preset_edited = (reader.is_release_at_least(PhasePlantRelease.V1_8_0)
                         and reader.read_bool32())
        effect.header_flag = reader.read_u8()
        effect.oversample_mode = reader.read_enum(OversampleMode)
        enabled = reader.read_bool32()
        minimized = reader.read_bool32()

        slots: List[SliceEqFilter] = []
        existing: List[bool] = []
        for index in range(cls.FILTER_COUNT_MAX):
            logger.debug("Slice EQ filter %d at position %d", index, reader.pos)
            exists, eq_filter = cls._read_filter(reader, index)
            if index == 7:
                effect.mix = reader.read_f32()
                effect.stereo_mode = reader.read_enum(StereoMode)
                effect.spectrum_view.falloff_speed = reader.read_enum(FalloffSpeed)
                effect.spectrum_view.frequency_resolution = reader.read_enum(FrequencyResolution)
                effect.edit_mode = reader.read_enum(ChannelMode)
                effect.gain = reader.read_decibels_db()
                for earlier in slots:
                    earlier.channel_mode = reader.read_enum(ChannelMode)
            if index >= 7:
                eq_filter.channel_mode = reader.read_enum(ChannelMode)
            slots.append(eq_filter)
            existing.append(exists)

        effect.filters = [f for f, exists in zip(slots, existing) if exists]
        effect.empty_slots = {index: f for index, (f, exists) in enumerate(zip(slots, existing))
                              if not exists}

        reader.expect_u32(1, 'slice_eq_unknown10')
        reader.expect_u32(0, 'slice_eq_unknown11')
        reader.expect_u32(0, 'slice_eq_unknown12')
        reader.expect_u32(0, 'slice_eq_unknown13')
        effect.offset_semitones = reader.read_f32()
        if effect_version >= 1021:
            view = effect.spectrum_view
            view.y_min = reader.read_decibels_db()
            view.y_max = reader.read_decibels_db()
            # Reversed until the view has been zoomed or panned
            view.x_min = reader.read_f32()
            view.x_max = reader.read_f32()
            effect.spectrum_view = view.normalize()
        reader.expect_u32(0, 'slice_eq_unknown22')
        if effect_version >= 1020:
            reader.expect_u32(0, 'slice_eq_unknown23')
        group_id = reader.read_group_id() if effect_version >= 1030 else None
        return result(effect, enabled, minimized, group_id, preset_name=preset_name,
                      preset_path=preset_path, preset_edited=preset_edited)

    def write(self, writer, snapin):
        version = self.write_version()
        slots = self._slots()
        header_size = SLICE_EQ_HEADER_UNKNOWN
        if version >= 1020:
            header_size += SLICE_EQ_HEADER_EXTRA
        header = self.header if self.header is not None else bytes(header_size)
        if len(header) != header_size:
            raise RangeError(
                f"Slice EQ header of {len(header)} bytes does not match version {version}")

        writer.write_u32(self.header_length)
        writer.write_u32(self.version_a_major)
        writer.write_u32(self.version_b.patch)
        writer.write_u32(self.version_b.minor)
        writer.write_u32(self.version_b.major)
        writer.write_bytes(header)
        writer.write_string(snapin.preset_name)
        writer.write_path(snapin.preset_path)
        writer.write_bool32(snapin.preset_edited)
        writer.write_u8(self.header_flag)
        writer.write_enum(self.oversample_mode)
        writer.write_bool32(snapin.enabled)
        writer.write_bool32(snapin.minimized)

        stored = [eq_filter or self.empty_slots.get(index) or SliceEqFilter.deleted()
                  for index, eq_filter in enumerate(slots)]
        for index, eq_filter in enumerate(stored):
            self._write_filter(writer, slots[index] is not None, eq_filter)
            if index == 7:
                writer.write_f32(self.mix)
                writer.write_enum(self.stereo_mode)
                writer.write_enum(self.spectrum_view.falloff_speed)
                writer.write_enum(self.spectrum_view.frequency_resolution)
                writer.write_enum(self.edit_mode)
                writer.write_decibels_db(self.gain)
                for earlier in stored[:7]:
                    writer.write_enum(earlier.channel_mode)
            if index >= 7:
                writer.write_enum(eq_filter.channel_mode)

        writer.write_u32(1)
        writer.write_u32(0)
        writer.write_u32(0)
        writer.write_u32(0)
        writer.write_f32(self.offset_semitones)
        if version >= 1021:
            writer.write_decibels_db(self.spectrum_view.y_min)
            writer.write_decibels_db(self.spectrum_view.y_max)
            writer.write_f32(self.spectrum_view.x_min)
            writer.write_f32(self.spectrum_view.x_max)
        writer.write_u32(0)
        if version >= 1020:
            writer.write_u32(0)
        if version >= 1030:
            writer.write_group_id(snapin.group_id)


# ==============================================================================
# Multipass / Snap Heap
# ==============================================================================

class _OpaqueHostEffect(HostEffect):
    """Host effect whose payload is kept as a single block of bytes.

    The payload holds nested lanes of snapins and the host's own macros.
    Its size depends only on the effect version.
    """
    data: bytes
    read_version: Optional[int]

    # (effect version, bytes added from that version)
    PAYLOAD_SIZES = []

    @classmethod
    def payload_size(cls, effect_version: int) -> int:
        return sum(size for version, size in cls.PAYLOAD_SIZES if effect_version >= version)

    def __post_init__(self):
        if not self.data:
            self.data = bytes(self.payload_size(self.write_version()))

    @classmethod
    def read(cls, reader, effect_version):
        cls.check_version(effect_version)
        size = cls.payload_size(effect_version)
        logger.debug("Keeping %d byte %s payload", size, cls.mode.label)
        data = reader.read_bytes(size)
        return result(cls(data, effect_version), True, False)

    def write(self, writer, snapin):
        expected = self.payload_size(self.write_version())
        if len(self.data) != expected:
            raise RangeError(
                f"{self.mode.label} payload of {len(self.data)} bytes does not match "
                f"version {self.write_version()}, expected {expected}")
        writer.write_bytes(self.data)


@register_effect
@dataclass
class Multipass(_OpaqueHostEffect):
    mode = EffectMode.MULTIPASS
    MIN_VERSION = 1044
    WRITE_VERSION = 1058
    PAYLOAD_SIZES = [(0, 1957), (1056, 10090), (1057, 149), (1058, 128)]

    data: bytes = field(default=b'', repr=False)
    read_version: Optional[int] = None


@register_effect
@dataclass
class SnapHeap(_OpaqueHostEffect):
    mode = EffectMode.SNAP_HEAP
    MIN_VERSION = 1038
    WRITE_VERSION = 1051
    PAYLOAD_SIZES = [(0, 1849), (1050, 10347), (1051, 128)]

    data: bytes = field(default=b'', repr=False)
    read_version: Optional[int] = None

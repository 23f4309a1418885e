"""
Snapins

An effect placed in a lane together with its framing: display name,
position, the effect preset it was loaded from and the versions it was
saved with.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Type, TypeVar

from .effects.base import Effect, EffectMode, read_effect
from .errors import PhasePlantError, RangeError, UnknownEnumError
from .stream import PresetWriter
from .values import Metadata
from .version import WRITE_RELEASE, PhasePlantRelease, Version

logger = logging.getLogger(__name__)

# Slot layout produced by the writer
SLOT_FORMAT = 6

E = TypeVar('E', bound=Effect)


@dataclass
class Snapin:
    effect: Effect
    name: str = ""
    enabled: bool = True
    minimized: bool = False
    group_id: Optional[int] = None
    position: int = 1
    metadata: Metadata = field(default_factory=Metadata)
    preset_name: str = ""
    preset_path: List[str] = field(default_factory=list)
    preset_edited: bool = False
    # Byte stored after the preset path by 1.7.0 and later
    path_flag: int = 0
    # Release of Phase Plant the snapin was saved with, zero for Group
    host_version: Version = field(default_factory=lambda: WRITE_RELEASE.version)
    effect_version: int = 0

    def __post_init__(self):
        if not self.name:
            # Group stores its own name field in place of the label
            self.name = self.effect.name or self.effect.mode.label
        if not self.effect_version:
            self.effect_version = self.effect.write_version()

    @property
    def mode(self) -> EffectMode:
        return self.effect.mode

    def effect_as(self, kind: Type[E]) -> E:
        """Return the effect, checked to be of the given kind."""
        if not isinstance(self.effect, kind):
            raise TypeError(f"Snapin {self.name} holds {self.effect.name}, not {kind.__name__}")
        return self.effect

    def __str__(self) -> str:
        state = "" if self.enabled else " (disabled)"
        return f"{self.position}: {self.name}{state}"


# ==============================================================================
# Reading
# ==============================================================================

def read_snapin(reader) -> Snapin:
    start = reader.pos
    # Stored most significant byte first, unlike every other word
    effect_id = int.from_bytes(reader.read_bytes(4), 'big')
    try:
        mode = EffectMode.from_id(effect_id)
    except UnknownEnumError:
        tag = effect_id.to_bytes(4, 'little').decode('ascii', errors='replace')
        raise UnknownEnumError(f'Unknown effect mode "{tag}" at position {start}') from None

    patch = reader.read_u8()
    minor = reader.read_u8()
    major = reader.read_u8()
    extra = reader.read_u8()
    host_version = Version(major, minor, patch, extra)

    name = reader.read_string()
    position = reader.read_u16()
    if position == 0:
        raise RangeError(f"Invalid position {position} for snapin {name or '<unknown>'} "
                         f"at position {reader.pos - 2}")

    effect_length = reader.read_u32()
    effect_start = reader.pos
    slot_format = reader.read_u32()
    logger.debug("Snapin %s: slot format %d, host version %s, effect length %d at position %d",
                 mode.label, slot_format, host_version, effect_length, effect_start)

    path_flag = 0
    if mode.is_host:
        if slot_format == 1:
            reader.read_u32()  # header length
            reader.read_u32()  # format major
        effect_version = reader.read_u32()
        format_major = reader.read_u32()
        logger.debug("Host snapin version %d, format major %d", effect_version, format_major)
        metadata = reader.read_metadata()
        loaded = read_effect(mode, reader, effect_version)
        loaded.metadata = metadata
    else:
        if slot_format == 1:
            raise PhasePlantError(
                f"Slot format 1 is not supported for {mode.label} at position {effect_start}")
        effect_version = reader.read_u32()
        preset_name = reader.read_string() if reader.read_bool32() else None
        if slot_format == 5:
            preset_path = [reader.read_string() or ""]
        else:
            preset_path = reader.read_path()
        if host_version.is_zero() or host_version.is_at_least(PhasePlantRelease.V1_7_0.version):
            path_flag = reader.read_u8()
        preset_edited = slot_format > 5 and reader.read_bool32()
        loaded = read_effect(mode, reader, effect_version)
        loaded.preset_name = preset_name
        loaded.preset_path = preset_path
        loaded.preset_edited = preset_edited

    remaining = effect_length - (reader.pos - effect_start)
    if remaining != 0:
        raise PhasePlantError(
            f"Effect {name or mode.label} version {effect_version} starting at {effect_start} "
            f"had {remaining} bytes remaining")

    return Snapin(effect=loaded.effect,
                  name=name or "",
                  enabled=loaded.enabled,
                  minimized=loaded.minimized,
                  group_id=loaded.group_id,
                  position=position,
                  metadata=loaded.metadata,
                  preset_name=loaded.preset_name or "",
                  preset_path=loaded.preset_path,
                  preset_edited=loaded.preset_edited,
                  path_flag=path_flag,
                  host_version=host_version,
                  effect_version=effect_version)


# ==============================================================================
# Writing
# ==============================================================================

def write_snapin(writer, snapin: Snapin, position: Optional[int] = None):
    """Write a snapin, at the given lane position when one is passed."""
    mode = snapin.effect.mode
    logger.debug("Writing snapin %s (%s) at position %d", snapin.name, mode.tag, writer.pos)
    writer.write_bytes(mode.value.to_bytes(4, 'big'))

    # Saved as the current release so Phase Plant applies no compatibility changes
    host = WRITE_RELEASE.version
    for part in (host.patch, host.minor, host.major, host.extra):
        writer.write_u8(part)

    writer.write_string(snapin.name)
    writer.write_u16(snapin.position if position is None else position)

    body = PresetWriter()
    body.write_u32(SLOT_FORMAT)
    body.write_u32(snapin.effect.write_version())
    if mode.is_host:
        body.write_u32(SLOT_FORMAT)
        body.write_metadata(snapin.metadata)
    else:
        body.write_bool32(True)
        body.write_string(snapin.preset_name)
        body.write_path(snapin.preset_path)
        body.write_u8(snapin.path_flag)
        body.write_bool32(snapin.preset_edited)
    snapin.effect.write(body, snapin)

    data = body.getvalue()
    writer.write_u32(len(data))
    writer.write_bytes(data)

"""
Utility Effects

Channel Mixer, Stereo, Group and Trance Gate.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from ..errors import RangeError
from ..values import WireEnum
from .base import Effect, EffectMode, register_effect, result


# ==============================================================================
# Channel Mixer / Stereo
# ==============================================================================

@register_effect
@dataclass
class ChannelMixer(Effect):
    """Stereo matrix. Every level is within -1..1."""
    mode = EffectMode.CHANNEL_MIXER
    MAX_VERSION = 1002
    WRITE_VERSION = 1002

    MIX_MIN = -1.0
    MIX_MAX = 1.0

    left_to_left: float = 1.0
    left_to_right: float = 0.0
    right_to_left: float = 0.0
    right_to_right: float = 1.0

    @classmethod
    def _read_level(cls, reader, name: str) -> float:
        value = reader.read_f32()
        if not cls.MIX_MIN <= value <= cls.MIX_MAX:
            raise RangeError(
                f"Channel mixer {name} of {value} is out of range at position {reader.pos - 4}")
        return value

    @classmethod
    def read(cls, reader, effect_version):
        cls.check_version(effect_version)
        left_to_left = cls._read_level(reader, 'left_to_left')
        right_to_left = cls._read_level(reader, 'right_to_left')
        left_to_right = cls._read_level(reader, 'left_to_right')
        right_to_right = cls._read_level(reader, 'right_to_right')
        enabled = reader.read_bool32()
        minimized = reader.read_bool32()
        reader.expect_u32(0, 'channel_mixer_unknown1')
        reader.expect_u32(0, 'channel_mixer_unknown2')
        group_id = reader.read_group_id()
        effect = cls(left_to_left, left_to_right, right_to_left, right_to_right)
        return result(effect, enabled, minimized, group_id)

    def write(self, writer, snapin):
        for value in (self.left_to_left, self.right_to_left,
                      self.left_to_right, self.right_to_right):
            writer.write_f32(value)
        writer.write_bool32(snapin.enabled)
        writer.write_bool32(snapin.minimized)
        writer.write_u32(0)
        writer.write_u32(0)
        writer.write_group_id(snapin.group_id)


@register_effect
@dataclass
class Stereo(Effect):
    mode = EffectMode.STEREO
    MIN_VERSION = 1038
    WRITE_VERSION = 1049

    mid: float = 1.0
    width: float = 1.0
    pan: float = 0.0

    @classmethod
    def read(cls, reader, effect_version):
        cls.check_version(effect_version)
        enabled = reader.read_bool32()
        width = reader.read_f32()
        pan = reader.read_f32()
        mid = reader.read_f32()
        minimized = reader.read_bool32()
        reader.expect_u32(0, 'stereo_unknown1')
        reader.expect_u32(0, 'stereo_unknown2')
        if effect_version >= 1047:
            reader.expect_u32(0, 'stereo_unknown3')
        return result(cls(mid, width, pan), enabled, minimized)

    def write(self, writer, snapin):
        writer.write_bool32(snapin.enabled)
        writer.write_f32(self.width)
        writer.write_f32(self.pan)
        writer.write_f32(self.mid)
        writer.write_bool32(snapin.minimized)
        writer.write_u32(0)
        writer.write_u32(0)
        if self.write_version() >= 1047:
            writer.write_u32(0)


# ==============================================================================
# Group
# ==============================================================================

@register_effect
@dataclass
class Group(Effect):
    """Folder of snapins inside a lane. Members point at it with their group id."""
    mode = EffectMode.GROUP
    MIN_VERSION = 1007
    WRITE_VERSION = 1007

    name: Optional[str] = None

    @classmethod
    def read(cls, reader, effect_version):
        cls.check_version(effect_version)
        enabled = reader.read_bool32()
        minimized = reader.read_bool32()
        reader.expect_u32(0, 'group_unknown1')
        reader.expect_u32(0, 'group_unknown2')
        group_id = reader.read_group_id()
        name = reader.read_string()
        return result(cls(name), enabled, minimized, group_id)

    def write(self, writer, snapin):
        writer.write_bool32(snapin.enabled)
        writer.write_bool32(snapin.minimized)
        writer.write_u32(0)
        writer.write_u32(0)
        writer.write_group_id(snapin.group_id)
        writer.write_string(self.name)


# ==============================================================================
# Trance Gate
# ==============================================================================

class PatternResolution(WireEnum):
    EIGHTH = 0
    EIGHTH_TRIPLET = 1
    SIXTEENTH = 2
    SIXTEENTH_TRIPLET = 3
    THIRTY_SECOND = 4
    THIRTY_SECOND_TRIPLET = 5
    SIXTY_FOURTH = 6

    @property
    def label(self) -> str:
        return ['1/8', '1/8T', '1/16', '1/16T', '1/32', '1/32T', '1/64'][self.value]


PATTERN_COUNT = 8
STEPS_MAX = 64

# Factory patterns of a new Trance Gate
_DEFAULT_STEP_COUNTS = [16, 16, 32, 16, 16, 16, 16, 64]
_DEFAULT_ENABLED_STEPS = [
    [0, 2, 4, 5, 6, 8, 10, 12, 13, 14],
    [0, 2, 4, 6, 8, 10, 12, 13, 14],
    [0, 1, 4, 6, 7, 10, 12, 13, 16, 18, 19, 22, 24, 25, 28, 29],
    [4, 5, 8, 12, 13],
    [0, 2, 4, 6, 8, 9, 12, 13],
    [0, 1, 4, 5, 8, 9, 10, 11, 14],
    [0, 1, 3, 5, 6, 8, 9, 11, 13, 14],
    [0, 1, 3, 5, 9, 10, 12, 14, 15, 17, 18, 22, 23, 25, 26, 30, 31, 33, 35, 37, 41,
     43, 45, 47, 48, 50, 51, 55, 57, 58],
]
_DEFAULT_TIED_STEPS = [
    [4, 5, 12, 13],
    [12, 13],
    [0, 6, 12, 18, 24, 28],
    [4, 12],
    [8, 12],
    [0, 4, 8, 9, 10],
    [0, 5, 8, 13],
    [0, 9, 14, 17, 22, 25, 30, 47, 50, 57],
]


def _step_rows(indices: List[List[int]]) -> List[List[bool]]:
    rows = []
    for row_indices in indices:
        row = [False] * STEPS_MAX
        for index in row_indices:
            row[index] = True
        rows.append(row)
    return rows


def default_step_enabled() -> List[List[bool]]:
    return _step_rows(_DEFAULT_ENABLED_STEPS)


def default_step_tied() -> List[List[bool]]:
    return _step_rows(_DEFAULT_TIED_STEPS)


@register_effect
@dataclass
class TranceGate(Effect):
    """Sequenced gate with eight patterns.

    Every pattern stores all 64 steps but only the first step_count of them
    are played.
    """
    mode = EffectMode.TRANCE_GATE
    MIN_VERSION = 1038
    WRITE_VERSION = 1049

    pattern_number: int = 1
    step_count: List[int] = field(default_factory=lambda: list(_DEFAULT_STEP_COUNTS))
    step_enabled: List[List[bool]] = field(default_factory=default_step_enabled)
    step_tied: List[List[bool]] = field(default_factory=default_step_tied)
    attack: float = 0.0132
    decay: float = 0.0556
    sustain: float = 0.5
    release: float = 0.0176
    resolution: PatternResolution = PatternResolution.THIRTY_SECOND
    mix: float = 1.0

    def pattern(self, index: int) -> List[bool]:
        """Enabled flags of the steps actually played by a pattern."""
        return self.step_enabled[index][:self.step_count[index]]

    @classmethod
    def read(cls, reader, effect_version):
        cls.check_version(effect_version)
        effect = cls()
        enabled = reader.read_bool32()
        effect.attack = reader.read_f32()
        effect.decay = reader.read_f32()
        effect.sustain = reader.read_f32()
        effect.release = reader.read_f32()
        effect.mix = reader.read_f32()
        effect.resolution = reader.read_enum(PatternResolution)
        effect.pattern_number = reader.read_u32()
        effect.step_count = []
        effect.step_enabled = []
        effect.step_tied = []
        for _ in range(PATTERN_COUNT):
            step_count = reader.read_u32()
            if step_count > STEPS_MAX:
                raise RangeError(f"Trance gate step count {step_count} is greater than "
                                 f"{STEPS_MAX} at position {reader.pos - 4}")
            effect.step_count.append(step_count)
            enabled_row = []
            tied_row = []
            for _ in range(STEPS_MAX):
                enabled_row.append(reader.read_bool32())
                tied_row.append(reader.read_bool32())
            effect.step_enabled.append(enabled_row)
            effect.step_tied.append(tied_row)
        minimized = reader.read_bool32()
        reader.expect_u32(0, 'trance_gate_unknown1')
        reader.expect_u32(0, 'trance_gate_unknown2')
        group_id = reader.read_group_id() if effect_version > 1038 else None
        return result(effect, enabled, minimized, group_id)

    def write(self, writer, snapin):
        if len(self.step_count) != PATTERN_COUNT:
            raise RangeError(f"Trance gate needs {PATTERN_COUNT} patterns, not {len(self.step_count)}")
        for pattern_index, count in enumerate(self.step_count):
            if not 0 <= count <= STEPS_MAX:
                raise RangeError(f"Trance gate pattern {pattern_index + 1} has a step count of "
                                 f"{count}, expected at most {STEPS_MAX}")
        for rows, name in ((self.step_enabled, 'enabled'), (self.step_tied, 'tied')):
            if len(rows) != PATTERN_COUNT:
                raise RangeError(
                    f"Trance gate needs {PATTERN_COUNT} rows of {name} steps, not {len(rows)}")
            for pattern_index, row in enumerate(rows):
                if len(row) != STEPS_MAX:
                    raise RangeError(f"Trance gate pattern {pattern_index + 1} has {len(row)} "
                                     f"{name} steps, expected {STEPS_MAX}")
        writer.write_bool32(snapin.enabled)
        writer.write_f32(self.attack)
        writer.write_f32(self.decay)
        writer.write_f32(self.sustain)
        writer.write_f32(self.release)
        writer.write_f32(self.mix)
        writer.write_enum(self.resolution)
        writer.write_u32(self.pattern_number)
        for pattern_index in range(PATTERN_COUNT):
            writer.write_u32(self.step_count[pattern_index])
            for step in range(STEPS_MAX):
                writer.write_bool32(self.step_enabled[pattern_index][step])
                writer.write_bool32(self.step_tied[pattern_index][step])
        writer.write_bool32(snapin.minimized)
        writer.write_u32(0)
        writer.write_u32(0)
        if self.write_version() > 1038:
            writer.write_group_id(snapin.group_id)

"""
Modulation Effects

Chorus, Ensemble, Flanger, Phaser, Frequency Shifter, Ring Mod and Pitch
Shifter.
"""

from dataclasses import dataclass

from ..errors import RangeError, UnknownEnumError
from ..values import WireEnum
from .base import Effect, EffectMode, register_effect, result


class MotionMode(WireEnum):
    RANDOM = 0
    SYMMETRIC = 1
    SINE = 2


class CompensationMode(WireEnum):
    OFF = 0
    LOW = 1
    HIGH = 2


class RingModulationMode(WireEnum):
    """Ring Mod carrier. Stored by name, not by number."""
    SINE_OSCILLATOR = 0
    LOW_PASS_NOISE = 1
    BAND_PASS_NOISE = 2
    SELF = 3
    SIDEBAND = 4

    @property
    def label(self) -> str:
        return _RING_MOD_NAMES[self]

    @classmethod
    def from_name(cls, name: str) -> 'RingModulationMode':
        for mode, mode_name in _RING_MOD_NAMES.items():
            if mode_name == name:
                return mode
        raise UnknownEnumError(f"Unknown ring modulation mode '{name}'")


_RING_MOD_NAMES = {
    RingModulationMode.SINE_OSCILLATOR: 'Sine Oscillator',
    RingModulationMode.LOW_PASS_NOISE: 'Low-pass Noise',
    RingModulationMode.BAND_PASS_NOISE: 'Band-pass Noise',
    RingModulationMode.SELF: 'Self',
    RingModulationMode.SIDEBAND: 'Sideband',
}


# ==============================================================================
# Chorus / Ensemble / Flanger / Phaser
# ==============================================================================

@register_effect
@dataclass
class Chorus(Effect):
    """Delay and depth are seconds. Two or three taps."""
    mode = EffectMode.CHORUS
    MIN_VERSION = 1037
    WRITE_VERSION = 1048

    taps: int = 2
    mix: float = 1.0
    spread: float = 1.0
    delay: float = 0.004
    depth: float = 0.004
    rate: float = 0.6

    @classmethod
    def read(cls, reader, effect_version):
        cls.check_version(effect_version)
        enabled = reader.read_bool32()
        delay = reader.read_f32()
        rate = reader.read_f32()
        depth = reader.read_f32()
        spread = reader.read_f32()
        mix = reader.read_f32()
        taps_id = reader.read_u32()
        if taps_id not in (0, 1):
            raise UnknownEnumError(
                f"Unexpected number of taps {taps_id} ({taps_id:#x}) at position {reader.pos - 4}")
        minimized = reader.read_bool32()
        reader.expect_u32(0, 'chorus_unknown1')
        reader.expect_u32(0, 'chorus_unknown2')
        if effect_version >= 1047:
            reader.expect_u32(0, 'chorus_unknown3')
        effect = cls(taps_id + 2, mix, spread, delay, depth, rate)
        return result(effect, enabled, minimized)

    def write(self, writer, snapin):
        if self.taps not in (2, 3):
            raise RangeError(f"Chorus supports 2 or 3 taps, not {self.taps}")
        writer.write_bool32(snapin.enabled)
        writer.write_f32(self.delay)
        writer.write_f32(self.rate)
        writer.write_f32(self.depth)
        writer.write_f32(self.spread)
        writer.write_f32(self.mix)
        writer.write_u32(self.taps - 2)
        writer.write_bool32(snapin.minimized)
        writer.write_u32(0)
        writer.write_u32(0)
        if self.write_version() >= 1047:
            writer.write_u32(0)


@register_effect
@dataclass
class Ensemble(Effect):
    mode = EffectMode.ENSEMBLE
    MIN_VERSION = 1003
    WRITE_VERSION = 1014

    voices: int = 6
    detune: float = 0.25
    spread: float = 0.5
    mix: float = 1.0
    motion_mode: MotionMode = MotionMode.SYMMETRIC

    @classmethod
    def read(cls, reader, effect_version):
        cls.check_version(effect_version)
        voices = reader.read_u32()
        detune = reader.read_f32()
        spread = reader.read_f32()
        mix = reader.read_f32()
        enabled = reader.read_bool32()
        minimized = reader.read_bool32()
        reader.expect_u32(0, 'ensemble_unknown1')
        motion_mode = reader.read_enum(MotionMode)
        reader.expect_u32(0, 'ensemble_unknown2')
        if effect_version >= 1012:
            reader.expect_u32(0, 'ensemble_unknown3')
        effect = cls(voices, detune, spread, mix, motion_mode)
        return result(effect, enabled, minimized)

    def write(self, writer, snapin):
        writer.write_u32(self.voices)
        writer.write_f32(self.detune)
        writer.write_f32(self.spread)
        writer.write_f32(self.mix)
        writer.write_bool32(snapin.enabled)
        writer.write_bool32(snapin.minimized)
        writer.write_u32(0)
        writer.write_enum(self.motion_mode)
        writer.write_u32(0)
        if self.write_version() >= 1012:
            writer.write_u32(0)


@register_effect
@dataclass
class Flanger(Effect):
    """Offset is a fraction of a full 360 degree cycle."""
    mode = EffectMode.FLANGER
    MIN_VERSION = 1002
    WRITE_VERSION = 1013

    delay: float = 0.001
    depth: float = 0.00103
    rate: float = 0.31
    scroll: bool = True
    offset: float = 0.0
    motion: float = 0.5
    spread: float = 0.25
    feedback: float = 0.0
    mix: float = 1.0

    @classmethod
    def read(cls, reader, effect_version):
        cls.check_version(effect_version)
        delay = reader.read_f32()
        depth = reader.read_f32()
        rate = reader.read_f32()
        offset = reader.read_f32()
        if not 0.0 <= offset <= 1.0:
            raise RangeError(f"Flanger offset {offset} is out of range at position {reader.pos - 4}")
        motion = reader.read_f32()
        feedback = reader.read_f32()
        spread = reader.read_f32()
        mix = reader.read_f32()
        scroll = reader.read_bool32()
        enabled = reader.read_bool32()
        minimized = reader.read_bool32()
        reader.expect_u32(0, 'flanger_unknown1')
        reader.expect_u32(0, 'flanger_unknown2')
        if effect_version > 1002:
            reader.expect_u32(0, 'flanger_unknown3')
        effect = cls(delay, depth, rate, scroll, offset, motion, spread, feedback, mix)
        return result(effect, enabled, minimized)

    def write(self, writer, snapin):
        writer.write_f32(self.delay)
        writer.write_f32(self.depth)
        writer.write_f32(self.rate)
        writer.write_f32(self.offset)
        writer.write_f32(self.motion)
        writer.write_f32(self.feedback)
        writer.write_f32(self.spread)
        writer.write_f32(self.mix)
        writer.write_bool32(self.scroll)
        writer.write_bool32(snapin.enabled)
        writer.write_bool32(snapin.minimized)
        writer.write_u32(0)
        writer.write_u32(0)
        if self.write_version() > 1002:
            writer.write_u32(0)


@register_effect
@dataclass
class Phaser(Effect):
    mode = EffectMode.PHASER
    MIN_VERSION = 1037
    WRITE_VERSION = 1037

    cutoff: float = 500.0
    rate: float = 0.6
    depth: float = 0.5
    order: int = 3
    spread: float = 0.5
    mix: float = 1.0

    @classmethod
    def read(cls, reader, effect_version):
        cls.check_version(effect_version)
        enabled = reader.read_bool32()
        order = reader.read_u32()
        cutoff = reader.read_f32()
        depth = reader.read_f32()
        rate = reader.read_f32()
        spread = reader.read_f32()
        mix = reader.read_f32()
        minimized = reader.read_bool32()
        reader.expect_u32(0, 'phaser_end1')
        reader.expect_u32(0, 'phaser_end2')
        if effect_version >= 1048:
            reader.expect_u32(0, 'phaser_end3')
        return result(cls(cutoff, rate, depth, order, spread, mix), enabled, minimized)

    def write(self, writer, snapin):
        writer.write_bool32(snapin.enabled)
        writer.write_u32(self.order)
        writer.write_f32(self.cutoff)
        writer.write_f32(self.depth)
        writer.write_f32(self.rate)
        writer.write_f32(self.spread)
        writer.write_f32(self.mix)
        writer.write_bool32(snapin.minimized)
        writer.write_u32(0)
        writer.write_u32(0)
        if self.write_version() >= 1048:
            writer.write_u32(0)


# ==============================================================================
# Frequency Shifter / Ring Mod / Pitch Shifter
# ==============================================================================

@register_effect
@dataclass
class FrequencyShifter(Effect):
    mode = EffectMode.FREQUENCY_SHIFTER
    MIN_VERSION = 1037
    WRITE_VERSION = 1047

    # Stored in kHz
    frequency_khz: float = 0.0

    @property
    def frequency(self) -> float:
        return self.frequency_khz * 1000.0

    @classmethod
    def read(cls, reader, effect_version):
        cls.check_version(effect_version)
        enabled = reader.read_bool32()
        frequency_khz = reader.read_f32()
        minimized = reader.read_bool32()
        reader.expect_u32(0, 'frequency_shifter_unknown1')
        reader.expect_u32(0, 'frequency_shifter_unknown2')
        group_id = reader.read_group_id() if effect_version > 1037 else None
        return result(cls(frequency_khz), enabled, minimized, group_id)

    def write(self, writer, snapin):
        writer.write_bool32(snapin.enabled)
        writer.write_f32(self.frequency_khz)
        writer.write_bool32(snapin.minimized)
        writer.write_u32(0)
        writer.write_u32(0)
        if self.write_version() > 1037:
            writer.write_group_id(snapin.group_id)


@register_effect
@dataclass
class RingMod(Effect):
    mode = EffectMode.RING_MOD
    MIN_VERSION = 1032
    WRITE_VERSION = 1043

    bias: float = 0.0
    rectify: float = 0.0
    frequency: float = 440.0
    spread: float = 0.0
    mix: float = 1.0
    modulation_mode: RingModulationMode = RingModulationMode.SINE_OSCILLATOR
    unknown2: int = 0
    unknown3: int = 0

    @classmethod
    def read(cls, reader, effect_version):
        cls.check_version(effect_version)
        enabled = reader.read_bool32()
        frequency = reader.read_f32()
        spread = reader.read_f32()
        mix = reader.read_f32()
        bias = reader.read_f32()
        rectify = reader.read_f32()
        minimized = reader.read_bool32()
        reader.expect_u32(0, 'ring_mod_unknown3')
        reader.expect_u32(0, 'ring_mod_unknown4')
        unknown3 = reader.read_u32()
        unknown2 = reader.read_u32() if effect_version > 1032 else 0
        modulation_mode = RingModulationMode.from_name(reader.read_string() or '')
        effect = cls(bias, rectify, frequency, spread, mix, modulation_mode, unknown2, unknown3)
        return result(effect, enabled, minimized)

    def write(self, writer, snapin):
        writer.write_bool32(snapin.enabled)
        writer.write_f32(self.frequency)
        writer.write_f32(self.spread)
        writer.write_f32(self.mix)
        writer.write_f32(self.bias)
        writer.write_f32(self.rectify)
        writer.write_bool32(snapin.minimized)
        writer.write_u32(0)
        writer.write_u32(0)
        writer.write_u32(self.unknown3)
        if self.write_version() > 1032:
            writer.write_u32(self.unknown2)
        writer.write_string(self.modulation_mode.label)


@register_effect
@dataclass
class PitchShifter(Effect):
    mode = EffectMode.PITCH_SHIFTER
    MIN_VERSION = 1038
    WRITE_VERSION = 1050

    pitch: float = 0.0
    jitter: float = 0.0
    grain_size: float = 0.08
    mix: float = 1.0
    correlate: bool = True
    compensation_mode: CompensationMode = CompensationMode.LOW

    @classmethod
    def read(cls, reader, effect_version):
        cls.check_version(effect_version)
        enabled = reader.read_bool32()
        pitch = reader.read_f32()
        jitter = reader.read_f32()
        grain_size = reader.read_f32()
        mix = reader.read_f32()
        correlate = reader.read_bool32()
        minimized = reader.read_bool32()
        reader.expect_u32(0, 'pitch_shifter_unknown1')
        reader.expect_u32(0, 'pitch_shifter_unknown2')
        compensation_mode = reader.read_enum(CompensationMode)
        group_id = reader.read_group_id() if effect_version > 1039 else None
        effect = cls(pitch, jitter, grain_size, mix, correlate, compensation_mode)
        return result(effect, enabled, minimized, group_id)

    def write(self, writer, snapin):
        writer.write_bool32(snapin.enabled)
        writer.write_f32(self.pitch)
        writer.write_f32(self.jitter)
        writer.write_f32(self.grain_size)
        writer.write_f32(self.mix)
        writer.write_bool32(self.correlate)
        writer.write_bool32(snapin.minimized)
        writer.write_u32(0)
        writer.write_u32(0)
        writer.write_enum(self.compensation_mode)
        if self.write_version() > 1039:
            writer.write_group_id(snapin.group_id)

"""
Dynamics Effects

Compressor, Dynamics, Gate, Limiter, Transient Shaper and Gain. Compressor,
Gate and Transient Shaper end with a sidechain block.
"""

from dataclasses import dataclass

from ..values import Decibels, WireEnum
from .base import (Effect, EffectMode, SidechainMode, read_sidechain,
                   register_effect, result, write_sidechain)


class CompressorMode(WireEnum):
    ROOT_MEAN_SQUARED = 0
    PEAK = 1
    FAST = 2

    @property
    def label(self) -> str:
        return 'RMS' if self is CompressorMode.ROOT_MEAN_SQUARED else super().label


# ==============================================================================
# Compressor
# ==============================================================================

@register_effect
@dataclass
class Compressor(Effect):
    """Attack and release are seconds. Threshold is the stored linear gain."""
    mode = EffectMode.COMPRESSOR
    MIN_VERSION = 1039
    WRITE_VERSION = 1049

    compressor_mode: CompressorMode = CompressorMode.PEAK
    threshold: float = Decibels(-6.0).linear
    ratio: float = 2.0
    attack: float = 0.023
    release: float = 0.023
    makeup: float = 0.0
    sidechain_mode: SidechainMode = SidechainMode.OFF

    @property
    def threshold_db(self) -> Decibels:
        return Decibels.from_linear(self.threshold)

    @classmethod
    def read(cls, reader, effect_version):
        cls.check_version(effect_version)
        enabled = reader.read_bool32()
        attack = reader.read_f32()
        release = reader.read_f32()
        compressor_mode = reader.read_enum(CompressorMode)
        ratio = reader.read_f32()
        threshold = reader.read_f32()
        makeup = reader.read_f32()
        minimized = reader.read_bool32()
        reader.expect_u32(0, 'compressor_unknown1')
        reader.expect_u32(0, 'compressor_unknown2')
        if effect_version > 1039:
            reader.expect_u32(0, 'compressor_unknown3')
        sidechain_mode = read_sidechain(reader)
        effect = cls(compressor_mode, threshold, ratio, attack, release, makeup, sidechain_mode)
        return result(effect, enabled, minimized)

    def write(self, writer, snapin):
        writer.write_bool32(snapin.enabled)
        writer.write_f32(self.attack)
        writer.write_f32(self.release)
        writer.write_enum(self.compressor_mode)
        writer.write_f32(self.ratio)
        writer.write_f32(self.threshold)
        writer.write_f32(self.makeup)
        writer.write_bool32(snapin.minimized)
        writer.write_u32(0)
        writer.write_u32(0)
        if self.write_version() > 1039:
            writer.write_u32(0)
        write_sidechain(writer, self.sidechain_mode)


# ==============================================================================
# Dynamics
# ==============================================================================

@register_effect
@dataclass
class Dynamics(Effect):
    """Upward and downward compression around two thresholds."""
    mode = EffectMode.DYNAMICS
    MIN_VERSION = 1003
    WRITE_VERSION = 1014

    attack: float = 1.0
    release: float = 1.0
    knee: Decibels = Decibels(2.5)
    in_gain: Decibels = Decibels.ZERO
    out_gain: Decibels = Decibels.ZERO
    mix: float = 1.0
    low_threshold: Decibels = Decibels(-30.0)
    high_threshold: Decibels = Decibels(-20.0)
    low_ratio: float = 1.0
    high_ratio: float = 1.0

    @classmethod
    def read(cls, reader, effect_version):
        cls.check_version(effect_version)
        in_gain = reader.read_decibels_db()
        out_gain = reader.read_decibels_db()
        low_threshold = reader.read_decibels_db()
        low_ratio = reader.read_f32()
        high_threshold = reader.read_decibels_db()
        high_ratio = reader.read_f32()
        release = reader.read_f32()
        mix = reader.read_f32()
        enabled = reader.read_bool32()
        minimized = reader.read_bool32()
        reader.expect_u32(0, 'dynamics_unknown1')
        reader.expect_u32(0, 'dynamics_unknown2')
        attack = reader.read_f32()
        knee = reader.read_decibels_db()
        group_id = reader.read_group_id() if effect_version > 1003 else None
        effect = cls(attack, release, knee, in_gain, out_gain, mix,
                     low_threshold, high_threshold, low_ratio, high_ratio)
        return result(effect, enabled, minimized, group_id)

    def write(self, writer, snapin):
        writer.write_decibels_db(self.in_gain)
        writer.write_decibels_db(self.out_gain)
        writer.write_decibels_db(self.low_threshold)
        writer.write_f32(self.low_ratio)
        writer.write_decibels_db(self.high_threshold)
        writer.write_f32(self.high_ratio)
        writer.write_f32(self.release)
        writer.write_f32(self.mix)
        writer.write_bool32(snapin.enabled)
        writer.write_bool32(snapin.minimized)
        writer.write_u32(0)
        writer.write_u32(0)
        writer.write_f32(self.attack)
        writer.write_decibels_db(self.knee)
        if self.write_version() > 1003:
            writer.write_group_id(snapin.group_id)


# ==============================================================================
# Gate
# ==============================================================================

@register_effect
@dataclass
class Gate(Effect):
    mode = EffectMode.GATE
    MIN_VERSION = 1029
    WRITE_VERSION = 1040

    DEFAULT_THRESHOLD_DB = -30.00000046767787
    DEFAULT_TOLERANCE_DB = 6.020599913279624

    threshold: Decibels = Decibels(DEFAULT_THRESHOLD_DB)
    range: float = 1.0
    tolerance: Decibels = Decibels(DEFAULT_TOLERANCE_DB)
    hold: float = 0.025
    attack: float = 0.005
    release: float = 0.025
    look_ahead: bool = True
    flip: bool = False
    sidechain_mode: SidechainMode = SidechainMode.OFF

    @classmethod
    def read(cls, reader, effect_version):
        cls.check_version(effect_version)
        attack = reader.read_f32()
        hold = reader.read_f32()
        release = reader.read_f32()
        threshold = reader.read_decibels_linear()
        tolerance = reader.read_decibels_linear()
        gate_range = reader.read_f32()
        look_ahead = reader.read_bool32()
        flip = reader.read_bool32()
        enabled = reader.read_bool32()
        minimized = reader.read_bool32()
        reader.expect_u32(0, 'gate_unknown1')
        reader.expect_u32(0, 'gate_unknown2')
        group_id = reader.read_group_id() if effect_version > 1029 else None
        sidechain_mode = read_sidechain(reader)
        effect = cls(threshold, gate_range, tolerance, hold, attack, release,
                     look_ahead, flip, sidechain_mode)
        return result(effect, enabled, minimized, group_id)

    def write(self, writer, snapin):
        writer.write_f32(self.attack)
        writer.write_f32(self.hold)
        writer.write_f32(self.release)
        writer.write_decibels_linear(self.threshold)
        writer.write_decibels_linear(self.tolerance)
        writer.write_f32(self.range)
        writer.write_bool32(self.look_ahead)
        writer.write_bool32(self.flip)
        writer.write_bool32(snapin.enabled)
        writer.write_bool32(snapin.minimized)
        writer.write_u32(0)
        writer.write_u32(0)
        if self.write_version() > 1029:
            writer.write_group_id(snapin.group_id)
        write_sidechain(writer, self.sidechain_mode)


# ==============================================================================
# Limiter
# ==============================================================================

@register_effect
@dataclass
class Limiter(Effect):
    mode = EffectMode.LIMITER
    MIN_VERSION = 1038
    WRITE_VERSION = 1048

    threshold: Decibels = Decibels.ZERO
    release: float = 0.023
    in_gain: Decibels = Decibels.ZERO
    out_gain: Decibels = Decibels.ZERO

    @classmethod
    def read(cls, reader, effect_version):
        cls.check_version(effect_version)
        enabled = reader.read_bool32()
        in_gain = reader.read_decibels_linear()
        out_gain = reader.read_decibels_linear()
        threshold = reader.read_decibels_linear()
        release = reader.read_f32()
        minimized = reader.read_bool32()
        reader.expect_u32(0, 'limiter_unknown1')
        reader.expect_u32(0, 'limiter_unknown2')
        group_id = reader.read_group_id() if effect_version >= 1047 else None
        return result(cls(threshold, release, in_gain, out_gain), enabled, minimized, group_id)

    def write(self, writer, snapin):
        writer.write_bool32(snapin.enabled)
        writer.write_decibels_linear(self.in_gain)
        writer.write_decibels_linear(self.out_gain)
        writer.write_decibels_linear(self.threshold)
        writer.write_f32(self.release)
        writer.write_bool32(snapin.minimized)
        writer.write_u32(0)
        writer.write_u32(0)
        if self.write_version() >= 1047:
            writer.write_group_id(snapin.group_id)


# ==============================================================================
# Transient Shaper
# ==============================================================================

@register_effect
@dataclass
class TransientShaper(Effect):
    mode = EffectMode.TRANSIENT_SHAPER
    MIN_VERSION = 1027
    WRITE_VERSION = 1037

    attack: float = 0.0
    pump: float = 0.0
    sustain: float = 0.0
    speed: float = 1.0
    clip: bool = False
    sidechain_mode: SidechainMode = SidechainMode.OFF

    @classmethod
    def read(cls, reader, effect_version):
        cls.check_version(effect_version)
        attack = reader.read_f32()
        pump = reader.read_f32()
        sustain = reader.read_f32()
        speed = reader.read_f32()
        clip = reader.read_bool32()
        enabled = reader.read_bool32()
        minimized = reader.read_bool32()
        reader.expect_u32(0, 'transient_shaper_unknown1')
        reader.expect_u32(0, 'transient_shaper_unknown2')
        group_id = reader.read_group_id() if effect_version >= 1034 else None
        sidechain_mode = read_sidechain(reader)
        effect = cls(attack, pump, sustain, speed, clip, sidechain_mode)
        return result(effect, enabled, minimized, group_id)

    def write(self, writer, snapin):
        writer.write_f32(self.attack)
        writer.write_f32(self.pump)
        writer.write_f32(self.sustain)
        writer.write_f32(self.speed)
        writer.write_bool32(self.clip)
        writer.write_bool32(snapin.enabled)
        writer.write_bool32(snapin.minimized)
        writer.write_u32(0)
        writer.write_u32(0)
        if self.write_version() >= 1034:
            writer.write_group_id(snapin.group_id)
        write_sidechain(writer, self.sidechain_mode)


# ==============================================================================
# Gain
# ==============================================================================

@register_effect
@dataclass
class Gain(Effect):
    """Amount is the stored linear gain, shown in dB or as a percentage."""
    mode = EffectMode.GAIN
    MIN_VERSION = 1038
    WRITE_VERSION = 1050

    AMOUNT_MIN_DB = -30.0
    AMOUNT_MAX_DB = 30.0

    amount: float = 1.0
    percentage: bool = False

    def amount_db(self) -> Decibels:
        return Decibels.from_linear(self.amount)

    def amount_percentage(self) -> float:
        """Position between the dB limits, 0.0 to 2.0."""
        span = self.AMOUNT_MAX_DB - self.AMOUNT_MIN_DB
        return (self.amount_db().db - self.AMOUNT_MIN_DB) / span * 2.0

    @classmethod
    def read(cls, reader, effect_version):
        cls.check_version(effect_version)
        enabled = reader.read_bool32()
        amount = reader.read_f32()
        minimized = reader.read_bool32()
        reader.expect_u32(0, 'gain_unknown1')
        percentage = reader.read_bool32()
        if effect_version > 1038:
            reader.expect_u32(0, 'gain_unknown2')
        group_id = reader.read_group_id() if effect_version >= 1048 else None
        return result(cls(amount, percentage), enabled, minimized, group_id)

    def write(self, writer, snapin):
        writer.write_bool32(snapin.enabled)
        writer.write_f32(self.amount)
        writer.write_bool32(snapin.minimized)
        writer.write_u32(0)
        writer.write_bool32(self.percentage)
        if self.write_version() > 1038:
            writer.write_u32(0)
        if self.write_version() >= 1048:
            writer.write_group_id(snapin.group_id)

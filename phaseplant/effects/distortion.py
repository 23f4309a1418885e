"""
Distortion Effects

Bitcrush, Distortion, Faturator, Disperser and Phase Distortion.
"""

from dataclasses import dataclass

from ..errors import RangeError
from ..values import Decibels, WireEnum
from .base import (Effect, EffectMode, SidechainMode, read_sidechain,
                   register_effect, result, write_sidechain)


class DistortionMode(WireEnum):
    OVERDRIVE = 0
    SATURATE = 1
    FOLDBACK = 2
    SINE = 3
    HARD_CLIP = 4
    # Added in Phase Plant 1.8.0
    QUANTIZE = 5


@register_effect
@dataclass
class Bitcrush(Effect):
    mode = EffectMode.BITCRUSH
    MIN_VERSION = 1038
    WRITE_VERSION = 1049

    frequency: float = 6000.0
    quantize: float = 1.0
    bits: float = 16.0
    dither: float = 0.0
    adc_quality: float = 1.0
    dac_quality: float = 0.0
    mix: float = 1.0

    @classmethod
    def read(cls, reader, effect_version):
        cls.check_version(effect_version)
        enabled = reader.read_bool32()
        frequency = reader.read_f32()
        bits = reader.read_f32()
        if bits < 0.0:
            raise RangeError(f"Unexpected number of bits ({bits}) at position {reader.pos - 4}")
        adc_quality = reader.read_f32()
        dac_quality = reader.read_f32()
        dither = reader.read_f32()
        quantize = reader.read_f32()
        mix = reader.read_f32()
        minimized = reader.read_bool32()
        reader.expect_u32(0, 'bitcrush_unknown1')
        reader.expect_u32(0, 'bitcrush_unknown2')
        if effect_version >= 1048:
            reader.expect_u32(0, 'bitcrush_unknown3')
        effect = cls(frequency, quantize, bits, dither, adc_quality, dac_quality, mix)
        return result(effect, enabled, minimized)

    def write(self, writer, snapin):
        writer.write_bool32(snapin.enabled)
        writer.write_f32(self.frequency)
        writer.write_f32(self.bits)
        writer.write_f32(self.adc_quality)
        writer.write_f32(self.dac_quality)
        writer.write_f32(self.dither)
        writer.write_f32(self.quantize)
        writer.write_f32(self.mix)
        writer.write_bool32(snapin.minimized)
        writer.write_u32(0)
        writer.write_u32(0)
        if self.write_version() >= 1048:
            writer.write_u32(0)


@register_effect
@dataclass
class Distortion(Effect):
    """Drive is stored as linear gain. The DC filter arrived in Phase Plant 2."""
    mode = EffectMode.DISTORTION
    MIN_VERSION = 1037
    WRITE_VERSION = 1050

    distortion_mode: DistortionMode = DistortionMode.OVERDRIVE
    drive: Decibels = Decibels(6.0)
    dynamics: float = 0.5
    bias: float = 0.0
    spread: float = 0.0
    dc_filter: bool = True
    mix: float = 1.0

    @classmethod
    def read(cls, reader, effect_version):
        cls.check_version(effect_version)
        enabled = reader.read_bool32()
        drive = reader.read_decibels_linear()
        bias = reader.read_f32()
        spread = reader.read_f32()
        distortion_mode = reader.read_enum(DistortionMode)
        dynamics = reader.read_f32()
        mix = reader.read_f32()
        minimized = reader.read_bool32()
        reader.expect_u32(0, 'distortion_unknown1')
        reader.expect_u32(0, 'distortion_unknown2')
        group_id = None
        dc_filter = True
        if effect_version > 1038:
            group_id = reader.read_group_id()
            dc_filter = reader.read_bool32()
        effect = cls(distortion_mode, drive, dynamics, bias, spread, dc_filter, mix)
        return result(effect, enabled, minimized, group_id)

    def write(self, writer, snapin):
        writer.write_bool32(snapin.enabled)
        writer.write_decibels_linear(self.drive)
        writer.write_f32(self.bias)
        writer.write_f32(self.spread)
        writer.write_enum(self.distortion_mode)
        writer.write_f32(self.dynamics)
        writer.write_f32(self.mix)
        writer.write_bool32(snapin.minimized)
        writer.write_u32(0)
        writer.write_u32(0)
        if self.write_version() > 1038:
            writer.write_group_id(snapin.group_id)
            writer.write_bool32(self.dc_filter)


@register_effect
@dataclass
class Faturator(Effect):
    mode = EffectMode.FATURATOR
    MIN_VERSION = 1040
    WRITE_VERSION = 1051

    drive: float = 0.518
    fuzz: float = 0.273
    color: float = 50.0
    stereo_turbo: float = 0.0
    mix: float = 1.0

    @classmethod
    def read(cls, reader, effect_version):
        cls.check_version(effect_version)
        drive = reader.read_f32()
        fuzz = reader.read_f32()
        stereo_turbo = reader.read_f32()
        color = reader.read_f32()
        mix = reader.read_f32()
        enabled = reader.read_bool32()
        minimized = reader.read_bool32()
        reader.expect_u32(0, 'faturator_unknown1')
        reader.expect_u32(0, 'faturator_unknown2')
        if effect_version > 1040:
            reader.expect_u32(0, 'faturator_unknown3')
        return result(cls(drive, fuzz, color, stereo_turbo, mix), enabled, minimized)

    def write(self, writer, snapin):
        writer.write_f32(self.drive)
        writer.write_f32(self.fuzz)
        writer.write_f32(self.stereo_turbo)
        writer.write_f32(self.color)
        writer.write_f32(self.mix)
        writer.write_bool32(snapin.enabled)
        writer.write_bool32(snapin.minimized)
        writer.write_u32(0)
        writer.write_u32(0)
        if self.write_version() > 1040:
            writer.write_u32(0)


@register_effect
@dataclass
class Disperser(Effect):
    mode = EffectMode.DISPERSER
    MIN_VERSION = 1039
    WRITE_VERSION = 1050

    frequency: float = 130.0
    amount: int = 18
    pinch: float = 0.5
    unknown2: bool = True

    @classmethod
    def read(cls, reader, effect_version):
        cls.check_version(effect_version)
        amount = reader.read_u32()
        frequency = reader.read_f32()
        pinch = reader.read_f32()
        unknown2 = reader.read_bool32()
        enabled = reader.read_bool32()
        minimized = reader.read_bool32()
        reader.expect_u32(0, 'disperser_unknown1')
        reader.expect_u32(0, 'disperser_unknown2')
        if effect_version > 1039:
            reader.expect_u32(0, 'disperser_unknown3')
        return result(cls(frequency, amount, pinch, unknown2), enabled, minimized)

    def write(self, writer, snapin):
        writer.write_u32(self.amount)
        writer.write_f32(self.frequency)
        writer.write_f32(self.pinch)
        writer.write_bool32(self.unknown2)
        writer.write_bool32(snapin.enabled)
        writer.write_bool32(snapin.minimized)
        writer.write_u32(0)
        writer.write_u32(0)
        if self.write_version() > 1039:
            writer.write_u32(0)


@register_effect
@dataclass
class PhaseDistortion(Effect):
    """Bias and spread are fractions of a full cycle."""
    mode = EffectMode.PHASE_DISTORTION
    MIN_VERSION = 1023
    WRITE_VERSION = 1034

    drive: float = 0.5
    normalize: float = 0.5
    tone: float = 640.0
    bias: float = 0.0
    spread: float = 0.0
    mix: float = 1.0
    sidechain_mode: SidechainMode = SidechainMode.OFF

    @classmethod
    def read(cls, reader, effect_version):
        cls.check_version(effect_version)
        drive = reader.read_f32()
        spread = reader.read_f32()
        mix = reader.read_f32()
        normalize = reader.read_f32()
        tone = reader.read_f32()
        bias = reader.read_f32()
        enabled = reader.read_bool32()
        minimized = reader.read_bool32()
        reader.expect_u32(0, 'phase_distortion_unknown1')
        reader.expect_u32(0, 'phase_distortion_unknown2')
        if effect_version >= 1034:
            reader.expect_u32(0, 'phase_distortion_unknown3')
        sidechain_mode = read_sidechain(reader)
        effect = cls(drive, normalize, tone, bias, spread, mix, sidechain_mode)
        return result(effect, enabled, minimized)

    def write(self, writer, snapin):
        writer.write_f32(self.drive)
        writer.write_f32(self.spread)
        writer.write_f32(self.mix)
        writer.write_f32(self.normalize)
        writer.write_f32(self.tone)
        writer.write_f32(self.bias)
        writer.write_bool32(snapin.enabled)
        writer.write_bool32(snapin.minimized)
        writer.write_u32(0)
        writer.write_u32(0)
        if self.write_version() >= 1034:
            writer.write_u32(0)
        write_sidechain(writer, self.sidechain_mode)

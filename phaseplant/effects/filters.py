"""
Filter Effects

Filter, Ladder Filter, Nonlinear Filter, Formant Filter, Comb Filter,
3-Band EQ and Resonator. FilterMode and NonlinearFilterMode are shared with
the filter generators.
"""

from dataclasses import dataclass

from ..errors import RangeError
from ..values import Decibels, WireEnum
from .base import Effect, EffectMode, register_effect, result


class FilterMode(WireEnum):
    LOW_PASS = 0
    BAND_PASS = 1
    HIGH_PASS = 2
    NOTCH = 3
    LOW_SHELF = 4
    PEAK = 5
    HIGH_SHELF = 6

    @property
    def label(self) -> str:
        return self.name.replace('_', ' ').title().replace(' ', '')


class NonlinearFilterMode(WireEnum):
    CLEAN = 0
    SATURATED = 1
    TUBULAR = 2
    CLIPPED = 3
    WARM = 4
    BIASED = 5
    FUZZY = 6
    METALLIC = 7
    DIGITAL = 8


# ==============================================================================
# Filter
# ==============================================================================

@register_effect
@dataclass
class Filter(Effect):
    mode = EffectMode.FILTER
    MIN_VERSION = 1039
    WRITE_VERSION = 1051

    # Generators default to 440 Hz and 0 dB
    filter_mode: FilterMode = FilterMode.LOW_PASS
    cutoff: float = 620.0
    q: float = 0.707
    gain: Decibels = Decibels(6.0)
    slope: int = 1

    RESONANCE_MIN = 0.1

    @classmethod
    def read(cls, reader, effect_version):
        cls.check_version(effect_version)
        enabled = reader.read_bool32()
        filter_mode = reader.read_enum(FilterMode)
        cutoff = reader.read_f32()
        q = reader.read_f32()
        gain = reader.read_decibels_db()
        minimized = reader.read_bool32()
        reader.expect_u32(0, 'filter_unknown1')
        reader.expect_u32(0, 'filter_unknown2')
        slope = reader.read_u32() if effect_version > 1039 else 1
        group_id = reader.read_group_id() if effect_version > 1040 else None
        return result(cls(filter_mode, cutoff, q, gain, slope), enabled, minimized, group_id)

    def write(self, writer, snapin):
        writer.write_bool32(snapin.enabled)
        writer.write_enum(self.filter_mode)
        writer.write_f32(self.cutoff)
        writer.write_f32(self.q)
        writer.write_decibels_db(self.gain)
        writer.write_bool32(snapin.minimized)
        writer.write_u32(0)
        writer.write_u32(0)
        if self.write_version() > 1039:
            writer.write_u32(self.slope)
        if self.write_version() > 1040:
            writer.write_group_id(snapin.group_id)


# ==============================================================================
# Ladder Filter
# ==============================================================================

@register_effect
@dataclass
class LadderFilter(Effect):
    """Diode or transistor ladder. Drive is stored as linear gain."""
    mode = EffectMode.LADDER_FILTER
    MIN_VERSION = 1029
    WRITE_VERSION = 1040

    DRIVE_MIN = Decibels(0.0)
    DRIVE_MAX = Decibels(45.0)

    cutoff: float = 440.0
    saturate: bool = False
    resonance: float = 0.0
    drive: Decibels = Decibels.ZERO
    bias: float = 0.0
    diode: bool = False

    @classmethod
    def read(cls, reader, effect_version):
        cls.check_version(effect_version)
        cutoff = reader.read_f32()
        resonance = reader.read_f32()
        start = reader.pos
        drive = reader.read_decibels_linear()
        if drive.db < cls.DRIVE_MIN.db:
            raise RangeError(f"Drive of {drive} is less than {cls.DRIVE_MIN} at position {start}")
        if drive.db > cls.DRIVE_MAX.db:
            raise RangeError(f"Drive of {drive} is greater than {cls.DRIVE_MAX} at position {start}")
        bias = reader.read_f32()
        diode = reader.read_bool32()
        saturate = reader.read_bool32()
        enabled = reader.read_bool32()
        minimized = reader.read_bool32()
        reader.expect_u32(0, 'ladder_filter_unknown1')
        reader.expect_u32(0, 'ladder_filter_unknown2')
        if effect_version >= 1040:
            reader.expect_u32(0, 'ladder_filter_unknown3')
        effect = cls(cutoff, saturate, resonance, drive, bias, diode)
        return result(effect, enabled, minimized)

    def write(self, writer, snapin):
        writer.write_f32(self.cutoff)
        writer.write_f32(self.resonance)
        writer.write_decibels_linear(self.drive)
        writer.write_f32(self.bias)
        writer.write_bool32(self.diode)
        writer.write_bool32(self.saturate)
        writer.write_bool32(snapin.enabled)
        writer.write_bool32(snapin.minimized)
        writer.write_u32(0)
        writer.write_u32(0)
        if self.write_version() >= 1040:
            writer.write_u32(0)


# ==============================================================================
# Nonlinear Filter
# ==============================================================================

@register_effect
@dataclass
class NonlinearFilter(Effect):
    mode = EffectMode.NONLINEAR_FILTER
    MIN_VERSION = 1000
    WRITE_VERSION = 1011

    cutoff: float = 440.0
    q: float = 0.707
    drive: float = 0.25
    nonlinear_mode: NonlinearFilterMode = NonlinearFilterMode.SATURATED
    filter_mode: FilterMode = FilterMode.LOW_PASS

    @classmethod
    def read(cls, reader, effect_version):
        cls.check_version(effect_version)
        filter_mode = reader.read_enum(FilterMode)
        nonlinear_mode = reader.read_enum(NonlinearFilterMode)
        cutoff = reader.read_f32()
        q = reader.read_f32()
        drive = reader.read_f32()
        enabled = reader.read_bool32()
        minimized = reader.read_bool32()
        reader.expect_u32(0, 'nonlinear_filter_unknown1')
        reader.expect_u32(0, 'nonlinear_filter_unknown2')
        if effect_version > 1000:
            reader.expect_u32(0, 'nonlinear_filter_unknown3')
        effect = cls(cutoff, q, drive, nonlinear_mode, filter_mode)
        return result(effect, enabled, minimized)

    def write(self, writer, snapin):
        writer.write_enum(self.filter_mode)
        writer.write_enum(self.nonlinear_mode)
        writer.write_f32(self.cutoff)
        writer.write_f32(self.q)
        writer.write_f32(self.drive)
        writer.write_bool32(snapin.enabled)
        writer.write_bool32(snapin.minimized)
        writer.write_u32(0)
        writer.write_u32(0)
        if self.write_version() > 1000:
            writer.write_u32(0)


# ==============================================================================
# Formant Filter
# ==============================================================================

@register_effect
@dataclass
class FormantFilter(Effect):
    """Vowel filter positioned on an X/Y pad of two formant frequencies."""
    mode = EffectMode.FORMANT_FILTER
    MIN_VERSION = 1037
    WRITE_VERSION = 1048

    q: float = 4.0
    lows: bool = True
    highs: bool = True
    x: float = 550.0
    y: float = 1500.0

    @classmethod
    def read(cls, reader, effect_version):
        cls.check_version(effect_version)
        enabled = reader.read_bool32()
        x = reader.read_f32()
        y = reader.read_f32()
        q = reader.read_f32()
        lows = reader.read_bool32()
        highs = reader.read_bool32()
        minimized = reader.read_bool32()
        reader.expect_u32(0, 'formant_filter_unknown1')
        reader.expect_u32(0, 'formant_filter_unknown2')
        group_id = reader.read_group_id() if effect_version >= 1038 else None
        return result(cls(q, lows, highs, x, y), enabled, minimized, group_id)

    def write(self, writer, snapin):
        writer.write_bool32(snapin.enabled)
        writer.write_f32(self.x)
        writer.write_f32(self.y)
        writer.write_f32(self.q)
        writer.write_bool32(self.lows)
        writer.write_bool32(self.highs)
        writer.write_bool32(snapin.minimized)
        writer.write_u32(0)
        writer.write_u32(0)
        if self.write_version() >= 1038:
            writer.write_group_id(snapin.group_id)


# ==============================================================================
# Comb Filter
# ==============================================================================

@register_effect
@dataclass
class CombFilter(Effect):
    mode = EffectMode.COMB_FILTER
    MIN_VERSION = 1038
    WRITE_VERSION = 1049

    frequency: float = 440.0
    polarity_minus: bool = False
    stereo: bool = False
    mix: float = 1.0

    @classmethod
    def read(cls, reader, effect_version):
        cls.check_version(effect_version)
        enabled = reader.read_bool32()
        frequency = reader.read_f32()
        mix = reader.read_f32()
        polarity_minus = reader.read_bool32()
        stereo = reader.read_bool32()
        minimized = reader.read_bool32()
        reader.expect_u32(0, 'comb_filter_unknown1')
        reader.expect_u32(0, 'comb_filter_unknown2')
        group_id = reader.read_group_id() if effect_version >= 1047 else None
        return result(cls(frequency, polarity_minus, stereo, mix), enabled, minimized, group_id)

    def write(self, writer, snapin):
        writer.write_bool32(snapin.enabled)
        writer.write_f32(self.frequency)
        writer.write_f32(self.mix)
        writer.write_bool32(self.polarity_minus)
        writer.write_bool32(self.stereo)
        writer.write_bool32(snapin.minimized)
        writer.write_u32(0)
        writer.write_u32(0)
        if self.write_version() >= 1047:
            writer.write_group_id(snapin.group_id)


# ==============================================================================
# 3-Band EQ
# ==============================================================================

@register_effect
@dataclass
class ThreeBandEq(Effect):
    mode = EffectMode.THREE_BAND_EQ
    MIN_VERSION = 1015
    WRITE_VERSION = 1026

    low_freq: float = 220.0
    high_freq: float = 2200.0
    low_gain: Decibels = Decibels.ZERO
    mid_gain: Decibels = Decibels.ZERO
    high_gain: Decibels = Decibels.ZERO

    @classmethod
    def read(cls, reader, effect_version):
        cls.check_version(effect_version)
        low_gain = reader.read_decibels_db()
        mid_gain = reader.read_decibels_db()
        high_gain = reader.read_decibels_db()
        low_freq = reader.read_f32()
        high_freq = reader.read_f32()
        enabled = reader.read_bool32()
        minimized = reader.read_bool32()
        reader.expect_u32(0, 'three_band_eq_unknown1')
        reader.expect_u32(0, 'three_band_eq_unknown2')
        if effect_version >= 1025:
            reader.expect_u32(0, 'three_band_eq_unknown3')
        effect = cls(low_freq, high_freq, low_gain, mid_gain, high_gain)
        return result(effect, enabled, minimized)

    def write(self, writer, snapin):
        writer.write_decibels_db(self.low_gain)
        writer.write_decibels_db(self.mid_gain)
        writer.write_decibels_db(self.high_gain)
        writer.write_f32(self.low_freq)
        writer.write_f32(self.high_freq)
        writer.write_bool32(snapin.enabled)
        writer.write_bool32(snapin.minimized)
        writer.write_u32(0)
        writer.write_u32(0)
        if self.write_version() >= 1025:
            writer.write_u32(0)


# ==============================================================================
# Resonator
# ==============================================================================

@register_effect
@dataclass
class Resonator(Effect):
    """Note is a MIDI note number plus fractional tuning."""
    mode = EffectMode.RESONATOR
    MIN_VERSION = 1038
    WRITE_VERSION = 1049

    note: float = 69.0
    sawtooth: bool = True
    decay: float = 0.01
    intensity: float = 0.5
    mix: float = 1.0

    @classmethod
    def read(cls, reader, effect_version):
        cls.check_version(effect_version)
        enabled = reader.read_bool32()
        note = reader.read_f32()
        decay = reader.read_f32()
        intensity = reader.read_f32()
        sawtooth = not reader.read_bool32()
        mix = reader.read_f32()
        minimized = reader.read_bool32()
        reader.expect_u32(0, 'resonator_unknown1')
        reader.expect_u32(0, 'resonator_unknown2')
        if effect_version > 1038:
            reader.expect_u32(0, 'resonator_unknown3')
        return result(cls(note, sawtooth, decay, intensity, mix), enabled, minimized)

    def write(self, writer, snapin):
        writer.write_bool32(snapin.enabled)
        writer.write_f32(self.note)
        writer.write_f32(self.decay)
        writer.write_f32(self.intensity)
        writer.write_bool32(not self.sawtooth)
        writer.write_f32(self.mix)
        writer.write_bool32(snapin.minimized)
        writer.write_u32(0)
        writer.write_u32(0)
        if self.write_version() > 1038:
            writer.write_u32(0)

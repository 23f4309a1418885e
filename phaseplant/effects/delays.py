"""
Time Based Effects

Delay, Dual Delay, Haas, Reverb, Convolver, Reverser and Tape Stop. Times are
seconds and mixes are ratios.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from ..errors import UnknownEnumError
from ..stream import PresetWriter
from ..values import Decibels
from .base import Effect, EffectMode, register_effect, result


# ==============================================================================
# Delay
# ==============================================================================

@register_effect
@dataclass
class Delay(Effect):
    """Bounce was called Ping Pong before Phase Plant 2."""
    mode = EffectMode.DELAY
    MIN_VERSION = 1037
    WRITE_VERSION = 1050

    time: float = 0.2
    sync: bool = False
    # Phase Plant 2 defaults to 0.4972512, version 1 used 0.5
    feedback: float = 0.5
    bounce: bool = False
    duck: float = 0.0
    pan: float = 0.0
    mix: float = 0.5
    tone: float = 0.0
    unknown2: int = 3
    unknown3: int = 4

    @classmethod
    def read(cls, reader, effect_version):
        cls.check_version(effect_version)
        enabled = reader.read_bool32()
        time = reader.read_f32()
        unknown2 = reader.read_u32()
        unknown3 = reader.read_u32()
        sync = reader.read_bool32()
        feedback = reader.read_f32()
        pan = reader.read_f32()
        bounce = reader.read_bool32()
        duck = reader.read_f32()
        mix = reader.read_f32()
        minimized = reader.read_bool32()
        reader.expect_u32(0, 'delay_unknown5')
        reader.expect_u32(0, 'delay_unknown6')
        group_id = reader.read_group_id() if effect_version >= 1046 else None
        tone = reader.read_f32() if effect_version >= 1049 else 0.0
        effect = cls(time, sync, feedback, bounce, duck, pan, mix, tone, unknown2, unknown3)
        return result(effect, enabled, minimized, group_id)

    def write(self, writer, snapin):
        writer.write_bool32(snapin.enabled)
        writer.write_f32(self.time)
        writer.write_u32(self.unknown2)
        writer.write_u32(self.unknown3)
        writer.write_bool32(self.sync)
        writer.write_f32(self.feedback)
        writer.write_f32(self.pan)
        writer.write_bool32(self.bounce)
        writer.write_f32(self.duck)
        writer.write_f32(self.mix)
        writer.write_bool32(snapin.minimized)
        writer.write_u32(0)
        writer.write_u32(0)
        if self.write_version() >= 1046:
            writer.write_group_id(snapin.group_id)
        if self.write_version() >= 1049:
            writer.write_f32(self.tone)


@register_effect
@dataclass
class DualDelay(Effect):
    mode = EffectMode.DUAL_DELAY
    MIN_VERSION = 1012
    WRITE_VERSION = 1013

    time: float = 0.2
    second_delay_length: float = 1.618034
    sync: bool = False
    tone: float = 0.0
    feedback: float = 0.5
    spread: float = 0.5
    duck: float = 0.0
    crosstalk: float = 0.5
    mix: float = 1.0 / 3.0

    @classmethod
    def read(cls, reader, effect_version):
        cls.check_version(effect_version)
        time = reader.read_f32()
        second_delay_length = reader.read_f32()
        feedback = reader.read_f32()
        crosstalk = reader.read_f32()
        spread = reader.read_f32()
        tone = reader.read_f32()
        mix = reader.read_f32()
        enabled = reader.read_bool32()
        minimized = reader.read_bool32()
        reader.expect_u32(0, 'dual_delay_unknown3')
        reader.expect_u32(0, 'dual_delay_unknown4')
        reader.expect_u32(0, 'dual_delay_unknown5')
        reader.expect_u32(3, 'dual_delay_unknown6')
        reader.expect_u32(4, 'dual_delay_unknown7')
        sync = reader.read_bool32()
        duck = reader.read_f32()
        effect = cls(time, second_delay_length, sync, tone, feedback, spread, duck, crosstalk, mix)
        return result(effect, enabled, minimized)

    def write(self, writer, snapin):
        writer.write_f32(self.time)
        writer.write_f32(self.second_delay_length)
        writer.write_f32(self.feedback)
        writer.write_f32(self.crosstalk)
        writer.write_f32(self.spread)
        writer.write_f32(self.tone)
        writer.write_f32(self.mix)
        writer.write_bool32(snapin.enabled)
        writer.write_bool32(snapin.minimized)
        writer.write_u32(0)
        writer.write_u32(0)
        writer.write_u32(0)
        writer.write_u32(3)
        writer.write_u32(4)
        writer.write_bool32(self.sync)
        writer.write_f32(self.duck)


@register_effect
@dataclass
class Haas(Effect):
    mode = EffectMode.HAAS
    MIN_VERSION = 1037
    WRITE_VERSION = 1048

    right: bool = True
    delay: float = 0.005

    @classmethod
    def read(cls, reader, effect_version):
        cls.check_version(effect_version)
        enabled = reader.read_bool32()
        right = reader.read_bool32()
        delay = reader.read_f32()
        minimized = reader.read_bool32()
        reader.expect_u32(0, 'haas_unknown1')
        reader.expect_u32(0, 'haas_unknown2')
        group_id = reader.read_group_id() if effect_version >= 1046 else None
        return result(cls(right, delay), enabled, minimized, group_id)

    def write(self, writer, snapin):
        writer.write_bool32(snapin.enabled)
        writer.write_bool32(self.right)
        writer.write_f32(self.delay)
        writer.write_bool32(snapin.minimized)
        writer.write_u32(0)
        writer.write_u32(0)
        if self.write_version() >= 1046:
            writer.write_group_id(snapin.group_id)


# ==============================================================================
# Reverb / Convolver
# ==============================================================================

@register_effect
@dataclass
class Reverb(Effect):
    """Dampen is decibels per second."""
    mode = EffectMode.REVERB
    MIN_VERSION = 1032
    WRITE_VERSION = 1032

    decay: float = 3.0
    dampen: Decibels = Decibels(25.0)
    size: float = 1.0
    width: float = 1.0
    early: float = 0.25
    mix: float = 0.25

    @classmethod
    def read(cls, reader, effect_version):
        cls.check_version(effect_version)
        size = reader.read_f32()
        decay = reader.read_f32()
        dampen = reader.read_decibels_db()
        width = reader.read_f32()
        mix = reader.read_f32()
        early = reader.read_f32()
        enabled = reader.read_bool32()
        minimized = reader.read_bool32()
        reader.expect_u32(0, 'reverb_unknown1')
        reader.expect_u32(0, 'reverb_unknown2')
        if effect_version > 1032:
            reader.expect_u32(0, 'reverb_unknown3')
        return result(cls(decay, dampen, size, width, early, mix), enabled, minimized)

    def write(self, writer, snapin):
        writer.write_f32(self.size)
        writer.write_f32(self.decay)
        writer.write_decibels_db(self.dampen)
        writer.write_f32(self.width)
        writer.write_f32(self.mix)
        writer.write_f32(self.early)
        writer.write_bool32(snapin.enabled)
        writer.write_bool32(snapin.minimized)
        writer.write_u32(0)
        writer.write_u32(0)
        if self.write_version() > 1032:
            writer.write_u32(0)


IR_BLOCK_PATH = 2
IR_BLOCK_PATH_PADDED = 3


@register_effect
@dataclass
class Convolver(Effect):
    """Impulse response convolution.

    The impulse response is referenced by name plus an optional path stored
    in its own data block. ir_block_mode remembers which of the two block
    layouts held the path so it can be written back the same way.
    """
    mode = EffectMode.CONVOLVER
    MIN_VERSION = 1017
    WRITE_VERSION = 1018

    ir_name: Optional[str] = None
    ir_path: List[str] = field(default_factory=list)
    start: float = 0.0
    end: float = 1.0
    fade_in: float = 0.0
    fade_out: float = 0.0
    stretch: float = 1.0
    delay: float = 0.0
    sync: bool = False
    tone: float = 0.0
    feedback: float = 0.0
    mix: float = 1.0
    reverse: bool = False
    ir_block_mode: Optional[int] = None

    @classmethod
    def read(cls, reader, effect_version):
        cls.check_version(effect_version)
        effect = cls()
        effect.mix = reader.read_f32()
        effect.stretch = reader.read_f32()
        enabled = reader.read_bool32()
        minimized = reader.read_bool32()
        reader.expect_u32(0, 'convolver_unknown5')
        reader.expect_u32(0, 'convolver_unknown6')
        effect.end = reader.read_f32()
        effect.fade_out = reader.read_f32()
        effect.feedback = reader.read_f32()
        effect.tone = reader.read_f32()
        effect.start = reader.read_f32()
        effect.fade_in = reader.read_f32()
        effect.delay = reader.read_f32()
        reader.expect_u32(0, 'convolver_unknown7')
        reader.expect_u32(4, 'convolver_unknown8')
        effect.sync = reader.read_bool32()
        effect.reverse = reader.read_bool32()
        reader.expect_u32(0, 'convolver_unknown9')
        effect.ir_name = reader.read_string()

        header_pos = reader.pos
        header = reader.read_block_header()
        if header.is_used:
            path = reader.read_string()
            effect.ir_path = [path] if path is not None else []
            if header.mode_id == IR_BLOCK_PATH_PADDED:
                reader.expect_u8(0, 'convolver_block_unknown1')
            elif header.mode_id != IR_BLOCK_PATH:
                raise UnknownEnumError(
                    f"Unexpected convolver IR block mode {header.mode_id} at position {header_pos}")
            effect.ir_block_mode = header.mode_id
        return result(effect, enabled, minimized)

    def write(self, writer, snapin):
        writer.write_f32(self.mix)
        writer.write_f32(self.stretch)
        writer.write_bool32(snapin.enabled)
        writer.write_bool32(snapin.minimized)
        writer.write_u32(0)
        writer.write_u32(0)
        writer.write_f32(self.end)
        writer.write_f32(self.fade_out)
        writer.write_f32(self.feedback)
        writer.write_f32(self.tone)
        writer.write_f32(self.start)
        writer.write_f32(self.fade_in)
        writer.write_f32(self.delay)
        writer.write_u32(0)
        writer.write_u32(4)
        writer.write_bool32(self.sync)
        writer.write_bool32(self.reverse)
        writer.write_u32(0)
        writer.write_string(self.ir_name)

        block_mode = self.ir_block_mode
        if block_mode is None and self.ir_path:
            block_mode = IR_BLOCK_PATH
        if block_mode is None:
            writer.write_unused_block()
            return
        block = PresetWriter()
        block.write_string(self.ir_path[0] if self.ir_path else None)
        if block_mode == IR_BLOCK_PATH_PADDED:
            block.write_u8(0)
        writer.write_data_block(block_mode, block.getvalue())


# ==============================================================================
# Reverser / Tape Stop
# ==============================================================================

@register_effect
@dataclass
class Reverser(Effect):
    mode = EffectMode.REVERSER
    MIN_VERSION = 1033
    WRITE_VERSION = 1044

    time: float = 0.2
    sync: bool = True
    crossfade: float = 0.1
    mix: float = 0.5
    unknown2: int = 4
    unknown3: int = 4

    @classmethod
    def read(cls, reader, effect_version):
        cls.check_version(effect_version)
        time = reader.read_f32()
        unknown2 = reader.read_u32()
        unknown3 = reader.read_u32()
        sync = reader.read_bool32()
        mix = reader.read_f32()
        crossfade = reader.read_f32()
        enabled = reader.read_bool32()
        minimized = reader.read_bool32()
        reader.expect_u32(0, 'reverser_unknown1')
        reader.expect_u32(0, 'reverser_unknown2')
        if effect_version > 1038:
            reader.expect_u32(0, 'reverser_unknown3')
        effect = cls(time, sync, crossfade, mix, unknown2, unknown3)
        return result(effect, enabled, minimized)

    def write(self, writer, snapin):
        writer.write_f32(self.time)
        writer.write_u32(self.unknown2)
        writer.write_u32(self.unknown3)
        writer.write_bool32(self.sync)
        writer.write_f32(self.mix)
        writer.write_f32(self.crossfade)
        writer.write_bool32(snapin.enabled)
        writer.write_bool32(snapin.minimized)
        writer.write_u32(0)
        writer.write_u32(0)
        if self.write_version() > 1038:
            writer.write_u32(0)


@register_effect
@dataclass
class TapeStop(Effect):
    mode = EffectMode.TAPE_STOP
    MIN_VERSION = 1034
    WRITE_VERSION = 1034

    running: bool = True
    stop_time: float = 0.2
    start_time: float = 0.2
    curve: float = 1.0

    @classmethod
    def read(cls, reader, effect_version):
        cls.check_version(effect_version)
        running = reader.read_bool32()
        start_time = reader.read_f32()
        stop_time = reader.read_f32()
        enabled = reader.read_bool32()
        curve = reader.read_f32()
        minimized = reader.read_bool32()
        reader.expect_u32(0, 'tape_stop_unknown2')
        reader.expect_u32(0, 'tape_stop_unknown3')
        if effect_version > 1038:
            reader.expect_u32(0, 'tape_stop_unknown4')
        return result(cls(running, stop_time, start_time, curve), enabled, minimized)

    def write(self, writer, snapin):
        writer.write_bool32(self.running)
        writer.write_f32(self.start_time)
        writer.write_f32(self.stop_time)
        writer.write_bool32(snapin.enabled)
        writer.write_f32(self.curve)
        writer.write_bool32(snapin.minimized)
        writer.write_u32(0)
        writer.write_u32(0)
        if self.write_version() > 1038:
            writer.write_u32(0)

"""
Modulators

Control signal sources: LFOs, envelopes, followers, MIDI inputs and the math
modulators.

Like generators, every modulator shares one record layout. The fixed part is
100 bytes, the rest is spread over the version gated tables of the preset.
ModulatorBlock is the union of all fields and the typed modulators map their
attributes onto it.
"""

import copy
import logging
from dataclasses import dataclass, field
from typing import ClassVar, Dict, List, Optional, Tuple, Type

from .errors import PhasePlantError, RangeError
from .stream import PresetWriter
from .values import (CurvePoint, Decibels, Envelope, LoopMode, NoteValue,
                     OutputRange, Rate, WireEnum, default_curve)

logger = logging.getLogger(__name__)

MODULATORS_MAX = 32
MODULATOR_BLOCK_SIZE = 100
DATA_BLOCKS_PER_MODULATOR = 2

# Group id of a modulator outside of any group
GROUP_ID_NONE = 0xFFFFFFFF

# Controller slot of a MIDI CC modulator that is not assigned
CONTROLLER_SLOT_NONE = 0xFFFFFFFF

NOTE_RANGE_MIN = 12
NOTE_RANGE_MAX = 120


# ==============================================================================
# Enumerations
# ==============================================================================

class ModulatorMode(WireEnum):
    BLANK = 0
    ENVELOPE = 1
    LFO = 2
    NOTE = 3
    VELOCITY = 4
    PRESSURE = 5
    SCALE = 7
    RANDOM = 8
    LOWER_LIMIT = 9
    UPPER_LIMIT = 10
    SAMPLE_AND_HOLD = 11
    AUDIO_FOLLOWER = 12
    NOTE_GATE = 13
    PITCH_TRACKER = 14
    PITCH_WHEEL = 15
    MIDI_CC = 16
    REMAP = 17
    MPE_TIMBRE = 18
    GROUP = 19
    LFO_TABLE = 20
    CURVE = 21
    SLEW_LIMITER = 22

    @property
    def label(self) -> str:
        return _MODULATOR_LABELS.get(self) or super().label

    @property
    def is_blank(self) -> bool:
        return self is ModulatorMode.BLANK

    @property
    def has_shape(self) -> bool:
        """Modes whose data block holds curve points."""
        return self in (ModulatorMode.CURVE, ModulatorMode.LFO, ModulatorMode.REMAP)


_MODULATOR_LABELS = {
    ModulatorMode.LFO: 'LFO',
    ModulatorMode.LFO_TABLE: 'LFO Table',
    ModulatorMode.MIDI_CC: 'MIDI CC',
    ModulatorMode.MPE_TIMBRE: 'MPE Timbre',
    ModulatorMode.SAMPLE_AND_HOLD: 'Sample & Hold',
}


class NoteTriggerMode(WireEnum):
    NEVER = 0
    LEGATO = 1
    ALWAYS = 2
    AUTO = 3


class VelocityTriggerMode(WireEnum):
    STRIKE = 0
    RELEASE = 1
    BOTH = 2


class VoiceMode(WireEnum):
    UNISON = 0
    INDEPENDENT = 1


class MeteringMode(WireEnum):
    PEAK = 0
    ROOT_MEAN_SQUARED = 1

    @property
    def label(self) -> str:
        return 'Peak' if self is MeteringMode.PEAK else 'RMS'


# ==============================================================================
# Audio sources
# ==============================================================================

def _source_id(tag: bytes) -> int:
    return int.from_bytes(tag, 'big')


@dataclass(frozen=True)
class AudioSourceId:
    """Signal followed by Audio Follower and Pitch Tracker.

    The id is a four character tag read most significant byte first, so "main"
    is stored as the bytes "niam". The name is what Phase Plant displays.
    """
    id: int = _source_id(b'main')
    name: str = "Master"

    @classmethod
    def from_tag(cls, tag: bytes, name: str) -> 'AudioSourceId':
        return cls(_source_id(tag), name)

    @property
    def tag(self) -> str:
        return self.id.to_bytes(4, 'big').decode('ascii', errors='replace')

    def __str__(self) -> str:
        return self.name


AUDIO_SOURCE_MASTER = AudioSourceId.from_tag(b'main', "Master")
AUDIO_SOURCE_LANE_1 = AudioSourceId.from_tag(b'lan1', "Lane 1")
AUDIO_SOURCE_LANE_2 = AudioSourceId.from_tag(b'lan2', "Lane 2")
AUDIO_SOURCE_LANE_3 = AudioSourceId.from_tag(b'lan3', "Lane 3")


# ==============================================================================
# Modulator block
# ==============================================================================

@dataclass
class ModulatorBlock:
    """Every field any modulator stores, in the units of the file."""
    id: int = 0
    mode: ModulatorMode = ModulatorMode.BLANK
    enabled: bool = True
    minimized: bool = False
    group_id: int = GROUP_ID_NONE

    output_range: OutputRange = OutputRange.UNIPOLAR
    loop_mode: LoopMode = LoopMode.INFINITE
    input_a: float = 0.0
    input_b: float = 0.0
    multiplier: float = 1.0
    depth: float = 1.0
    phase_offset: float = 0.0
    envelope: Envelope = field(default_factory=Envelope)
    rate: Rate = field(default_factory=Rate)
    velocity_trigger_mode: VelocityTriggerMode = VelocityTriggerMode.STRIKE
    note_trigger_mode: NoteTriggerMode = NoteTriggerMode.AUTO
    trigger_threshold: float = 0.5
    voice_mode: VoiceMode = VoiceMode.UNISON

    metering_mode: MeteringMode = MeteringMode.ROOT_MEAN_SQUARED
    gain: Decibels = Decibels.ZERO
    audio_source: AudioSourceId = AUDIO_SOURCE_MASTER

    curve_time: float = 1.0
    shape: List[CurvePoint] = field(default_factory=list)
    shape_name: Optional[str] = None
    shape_path: Optional[str] = None
    shape_edited: bool = False

    # Shared by Random and LFO Table
    smooth: float = 0.0
    lfo_table_frame: float = 0.0
    lfo_table_wavetable_contents: bytes = field(default=b'', repr=False)
    lfo_table_wavetable_path: Optional[str] = None

    controller_slot: Optional[int] = None
    root_note: int = 69
    note_range: int = 120

    pitch_tracker_lowest: int = 36
    pitch_tracker_root: int = 69
    pitch_tracker_highest: int = 84
    pitch_tracker_sensitivity: float = 0.0

    random_jitter: float = 0.0
    random_chaos: float = 1.0

    slew_limiter_attack: float = 0.1
    slew_limiter_decay: float = 0.1
    slew_limiter_linked: bool = True

    # Data blocks of modes the codec does not decode, as (mode id, bytes)
    data_blocks: List[Tuple[int, bytes]] = field(default_factory=list, repr=False)

    SIZE: ClassVar[int] = MODULATOR_BLOCK_SIZE

    @classmethod
    def blank(cls) -> 'ModulatorBlock':
        return cls(envelope=Envelope(decay=0.001))

    # --- Fixed record ---------------------------------------------------------

    @classmethod
    def read(cls, reader, index: int) -> 'ModulatorBlock':
        block = cls()
        block.mode = reader.read_enum(ModulatorMode)
        block.id = reader.read_u32()
        if block.id > MODULATORS_MAX:
            raise RangeError(
                f"Modulator {index} ID {block.id} is greater than {MODULATORS_MAX} "
                f"at position {reader.pos - 4}")
        block.enabled = reader.read_bool32()
        start = reader.pos
        block.input_a = reader.read_f32()
        block.input_b = reader.read_f32()
        block.depth = reader.read_f32()
        # Replaced by the trigger and loop modes of Phase Plant 2
        retrigger = reader.read_bool32()
        block.note_trigger_mode = NoteTriggerMode.AUTO if retrigger else NoteTriggerMode.NEVER
        block.output_range = reader.read_enum(OutputRange)
        block.rate = Rate(frequency=reader.read_f32(),
                          numerator=reader.read_u32(),
                          denominator=reader.read_enum(NoteValue),
                          sync=reader.read_bool32())
        block.envelope = reader.read_envelope()
        block.phase_offset = reader.read_f32()
        one_shot = reader.read_bool32()
        block.loop_mode = LoopMode.OFF if one_shot else LoopMode.INFINITE
        block.multiplier = reader.read_f32()
        reader.expect_f32(1.0, 'modulator_unknown1')
        block.smooth = reader.read_f32()
        block.random_jitter = reader.read_f32()
        block.random_chaos = reader.read_f32()
        remaining = cls.SIZE - (reader.pos - start)
        if remaining != 0:
            raise PhasePlantError(f"Modulator block had {remaining} bytes remaining")
        if not block.mode.is_blank:
            logger.debug("Modulator %d: %s id %d at position %d",
                         index, block.mode.label, block.id, start - 12)
        return block

    def write(self, writer):
        writer.write_enum(self.mode)
        writer.write_u32(self.id)
        writer.write_bool32(self.enabled)
        writer.write_f32(self.input_a)
        writer.write_f32(self.input_b)
        writer.write_f32(self.depth)
        writer.write_bool32(self.note_trigger_mode is not NoteTriggerMode.NEVER)
        writer.write_enum(self.output_range)
        writer.write_f32(self.rate.frequency)
        writer.write_u32(self.rate.numerator)
        writer.write_enum(self.rate.denominator)
        writer.write_bool32(self.rate.sync)
        writer.write_envelope(self.envelope)
        writer.write_f32(self.phase_offset)
        writer.write_bool32(self.loop_mode is LoopMode.OFF)
        writer.write_f32(self.multiplier)
        writer.write_f32(1.0)
        writer.write_f32(self.smooth)
        writer.write_f32(self.random_jitter)
        writer.write_f32(self.random_chaos)

    # --- Trigger table --------------------------------------------------------

    def read_triggers(self, reader):
        self.gain = reader.read_decibels_linear()
        self.group_id = reader.read_u32()
        self.trigger_threshold = reader.read_f32()
        self.note_trigger_mode = reader.read_enum(NoteTriggerMode)
        reader.expect_u32(0, 'block_d_unknown')
        self.metering_mode = reader.read_enum(MeteringMode)
        self.pitch_tracker_lowest = reader.read_u32()
        self.pitch_tracker_highest = reader.read_u32()
        self.pitch_tracker_sensitivity = reader.read_f32()
        self.pitch_tracker_root = reader.read_u32()
        slot = reader.read_u32()
        self.controller_slot = None if slot == CONTROLLER_SLOT_NONE else slot
        self.velocity_trigger_mode = reader.read_enum(VelocityTriggerMode)

    def write_triggers(self, writer):
        writer.write_decibels_linear(self.gain)
        writer.write_u32(self.group_id)
        writer.write_f32(self.trigger_threshold)
        writer.write_enum(self.note_trigger_mode)
        writer.write_u32(0)
        writer.write_enum(self.metering_mode)
        writer.write_u32(self.pitch_tracker_lowest)
        writer.write_u32(self.pitch_tracker_highest)
        writer.write_f32(self.pitch_tracker_sensitivity)
        writer.write_u32(self.pitch_tracker_root)
        writer.write_u32(CONTROLLER_SLOT_NONE if self.controller_slot is None
                         else self.controller_slot)
        writer.write_enum(self.velocity_trigger_mode)

    # --- Data blocks ----------------------------------------------------------

    def read_data_blocks(self, reader):
        for block_index in range(DATA_BLOCKS_PER_MODULATOR):
            start = reader.pos
            header = reader.read_block_header()
            end = reader.pos + header.data_length
            if header.is_used:
                if self.mode.has_shape:
                    logger.debug("Modulator %d shape data block at position %d", self.id, start)
                    self.shape = reader.read_curve_points()
                elif self.mode.is_blank:
                    # Left over in some factory presets
                    reader.skip(header.data_length)
                else:
                    logger.warning("Unhandled %s data block at position %d",
                                   self.mode.label, reader.pos)
                    self.data_blocks.append((header.mode_id, reader.read_bytes(header.data_length)))
            if reader.pos != end:
                raise PhasePlantError(
                    f"Modulator {self.mode.label} had {end - reader.pos} bytes remaining after "
                    f"data block {block_index} starting at {start}")

    def write_data_blocks(self, writer):
        blocks = list(self.data_blocks)
        if self.shape:
            data = PresetWriter()
            data.write_curve_points(self.shape)
            blocks.insert(0, (1, data.getvalue()))
        if len(blocks) > DATA_BLOCKS_PER_MODULATOR:
            raise RangeError(f"Modulator {self.id} has {len(blocks)} data blocks")
        for mode_id, data in blocks:
            writer.write_data_block(mode_id, data)
        for _ in range(DATA_BLOCKS_PER_MODULATOR - len(blocks)):
            writer.write_unused_block()

    def read_lfo_table_block(self, reader):
        start = reader.pos
        header = reader.read_block_header()
        end = reader.pos + header.data_length
        if header.is_used:
            self.lfo_table_wavetable_path = reader.read_string()
            if reader.read_bool8():
                self.lfo_table_wavetable_contents = reader.read_bytes(reader.read_u32())
        if reader.pos != end:
            raise PhasePlantError(
                f"LFO table data block starting at {start} had {end - reader.pos} bytes remaining")

    def write_lfo_table_block(self, writer):
        if not self.lfo_table_wavetable_path and not self.lfo_table_wavetable_contents:
            writer.write_unused_block()
            return
        data = PresetWriter()
        data.write_string(self.lfo_table_wavetable_path)
        data.write_bool8(bool(self.lfo_table_wavetable_contents))
        if self.lfo_table_wavetable_contents:
            data.write_u32(len(self.lfo_table_wavetable_contents))
            data.write_bytes(self.lfo_table_wavetable_contents)
        writer.write_data_block(1, data.getvalue())


# ==============================================================================
# Modulator kinds
# ==============================================================================

_MODULATOR_KINDS: Dict[ModulatorMode, Type['Modulator']] = {}


def register_modulator(cls):
    _MODULATOR_KINDS[cls.mode] = cls
    return cls


@dataclass
class Modulator:
    """Base of the typed modulators.

    ``BLOCK_FIELDS`` maps attribute names of the kind onto ModulatorBlock
    attributes.
    """
    mode: ClassVar[ModulatorMode]
    BLOCK_FIELDS: ClassVar[Dict[str, str]] = {}

    @property
    def name(self) -> str:
        return self.mode.label

    @classmethod
    def from_block(cls, block: ModulatorBlock) -> 'Modulator':
        return cls(**{attr: copy.deepcopy(getattr(block, block_attr))
                      for attr, block_attr in cls.BLOCK_FIELDS.items()})

    def _block_defaults(self) -> ModulatorBlock:
        return ModulatorBlock(mode=self.mode)

    def to_block(self) -> ModulatorBlock:
        block = self._block_defaults()
        for attr, block_attr in self.BLOCK_FIELDS.items():
            setattr(block, block_attr, copy.deepcopy(getattr(self, attr)))
        return block


@dataclass
class ModulatorContainer:
    """A modulator with the state every modulator slot has."""
    modulator: Modulator = None
    id: int = 0
    group_id: int = GROUP_ID_NONE
    enabled: bool = True
    minimized: bool = False
    data_blocks: List[Tuple[int, bytes]] = field(default_factory=list, repr=False)

    @property
    def mode(self) -> ModulatorMode:
        return self.modulator.mode

    @property
    def is_grouped(self) -> bool:
        return self.group_id != GROUP_ID_NONE

    @classmethod
    def from_block(cls, block: ModulatorBlock) -> 'ModulatorContainer':
        modulator = _MODULATOR_KINDS[block.mode].from_block(block)
        return cls(modulator, block.id, block.group_id, block.enabled, block.minimized,
                   list(block.data_blocks))

    def to_block(self) -> ModulatorBlock:
        block = self.modulator.to_block()
        block.id = self.id
        block.group_id = self.group_id
        block.enabled = self.enabled
        block.minimized = self.minimized
        block.data_blocks = list(self.data_blocks)
        return block

    def __post_init__(self):
        if self.modulator is None:
            self.modulator = BlankModulator()


_RANGE_DEPTH = {'output_range': 'output_range', 'depth': 'depth'}
_TRIGGER = {'note_trigger_mode': 'note_trigger_mode', 'trigger_threshold': 'trigger_threshold'}
_SHAPE = {'shape': 'shape', 'shape_name': 'shape_name', 'shape_path': 'shape_path',
          'shape_edited': 'shape_edited'}
_INPUTS = {'input_a': 'input_a', 'input_b': 'input_b'}


def _fields(*groups, **fields) -> Dict[str, str]:
    """Merge shared field groups with the fields of one kind."""
    merged: Dict[str, str] = {}
    for group in groups:
        merged.update(group)
    merged.update(fields)
    return merged


@register_modulator
@dataclass
class BlankModulator(Modulator):
    mode = ModulatorMode.BLANK

    def _block_defaults(self) -> ModulatorBlock:
        return ModulatorBlock.blank()


@register_modulator
@dataclass
class GroupModulator(Modulator):
    """Folder of modulators. Members carry its id as their group id."""
    mode = ModulatorMode.GROUP
    BLOCK_FIELDS = {'name': 'shape_name'}

    name: Optional[str] = None


@register_modulator
@dataclass
class EnvelopeModulator(Modulator):
    mode = ModulatorMode.ENVELOPE
    BLOCK_FIELDS = {'envelope': 'envelope', 'depth': 'depth'}

    envelope: Envelope = field(default_factory=Envelope)
    depth: float = 1.0


def _pyramid() -> List[CurvePoint]:
    return [CurvePoint.sharp(0.0, -1.0, 1.0, 1.0), CurvePoint.sharp(0.5, 1.0, 1.0, 1.0)]


@register_modulator
@dataclass
class LfoModulator(Modulator):
    """Phase Plant 2 defaults to the Pyramid shape. Earlier versions used Sine."""
    mode = ModulatorMode.LFO
    BLOCK_FIELDS = _fields(_RANGE_DEPTH, _TRIGGER, _SHAPE, loop_mode='loop_mode',
                           rate='rate', phase_offset='phase_offset')

    output_range: OutputRange = OutputRange.UNIPOLAR
    depth: float = 1.0
    loop_mode: LoopMode = LoopMode.INFINITE
    rate: Rate = field(default_factory=Rate)
    note_trigger_mode: NoteTriggerMode = NoteTriggerMode.AUTO
    trigger_threshold: float = 0.5
    phase_offset: float = 0.0
    shape: List[CurvePoint] = field(default_factory=_pyramid)
    shape_name: Optional[str] = "Pyramid"
    shape_path: Optional[str] = "factory/Classic/Pyramid.lfo"
    shape_edited: bool = False

    def _block_defaults(self) -> ModulatorBlock:
        # Envelope stored by Phase Plant 2.0.13 for new LFOs
        return ModulatorBlock(mode=self.mode, envelope=Envelope(decay=0.1))


@register_modulator
@dataclass
class CurveModulator(Modulator):
    """The file stores the curve length. The rate is its reciprocal."""
    mode = ModulatorMode.CURVE
    BLOCK_FIELDS = _fields(_RANGE_DEPTH, _TRIGGER, _SHAPE, loop_mode='loop_mode',
                           rate='rate')

    output_range: OutputRange = OutputRange.UNIPOLAR
    loop_mode: LoopMode = LoopMode.OFF
    rate: Rate = field(default_factory=Rate)
    note_trigger_mode: NoteTriggerMode = NoteTriggerMode.AUTO
    trigger_threshold: float = 0.5
    depth: float = 1.0
    shape: List[CurvePoint] = field(default_factory=default_curve)
    shape_name: Optional[str] = "Slope"
    shape_path: Optional[str] = "factory/Simple/Slope.lfo"
    shape_edited: bool = False

    @classmethod
    def from_block(cls, block: ModulatorBlock) -> 'CurveModulator':
        modulator = super().from_block(block)
        if block.curve_time:
            modulator.rate.frequency = 1.0 / block.curve_time
        return modulator

    def to_block(self) -> ModulatorBlock:
        block = super().to_block()
        if self.rate.frequency:
            block.curve_time = 1.0 / self.rate.frequency
        return block


@register_modulator
@dataclass
class LfoTableModulator(Modulator):
    mode = ModulatorMode.LFO_TABLE
    BLOCK_FIELDS = _fields(_RANGE_DEPTH, _TRIGGER, rate='rate', loop_mode='loop_mode',
                           phase_offset='phase_offset', smooth='smooth', frame='lfo_table_frame',
                           wavetable_contents='lfo_table_wavetable_contents',
                           wavetable_name='shape_name', wavetable_path='lfo_table_wavetable_path')

    output_range: OutputRange = OutputRange.UNIPOLAR
    depth: float = 1.0
    rate: Rate = field(default_factory=Rate)
    loop_mode: LoopMode = LoopMode.INFINITE
    note_trigger_mode: NoteTriggerMode = NoteTriggerMode.AUTO
    trigger_threshold: float = 0.5
    phase_offset: float = 0.0
    smooth: float = 0.0005
    frame: float = 0.0
    wavetable_contents: bytes = field(default=b'', repr=False)
    wavetable_name: Optional[str] = None
    wavetable_path: Optional[str] = None


@register_modulator
@dataclass
class RandomModulator(Modulator):
    mode = ModulatorMode.RANDOM
    BLOCK_FIELDS = _fields(_RANGE_DEPTH, _TRIGGER, rate='rate', jitter='random_jitter',
                           smooth='smooth', chaos='random_chaos', voice_mode='voice_mode')

    output_range: OutputRange = OutputRange.UNIPOLAR
    depth: float = 1.0
    rate: Rate = field(default_factory=Rate)
    jitter: float = 0.0
    smooth: float = 0.0
    chaos: float = 1.0
    note_trigger_mode: NoteTriggerMode = NoteTriggerMode.AUTO
    trigger_threshold: float = 0.5
    voice_mode: VoiceMode = VoiceMode.UNISON


@register_modulator
@dataclass
class AudioFollowerModulator(Modulator):
    """Attack and release share the envelope fields of the block."""
    mode = ModulatorMode.AUDIO_FOLLOWER
    BLOCK_FIELDS = _fields(_RANGE_DEPTH, gain='gain', audio_source='audio_source',
                           metering_mode='metering_mode')

    depth: float = 1.0
    output_range: OutputRange = OutputRange.UNIPOLAR
    gain: Decibels = Decibels.ZERO
    attack_time: float = 0.01
    release_time: float = 0.1
    audio_source: AudioSourceId = AUDIO_SOURCE_MASTER
    metering_mode: MeteringMode = MeteringMode.ROOT_MEAN_SQUARED

    @classmethod
    def from_block(cls, block: ModulatorBlock) -> 'AudioFollowerModulator':
        modulator = super().from_block(block)
        modulator.attack_time = block.envelope.attack
        modulator.release_time = block.envelope.release
        return modulator

    def to_block(self) -> ModulatorBlock:
        block = super().to_block()
        block.envelope = Envelope(delay=0.0, attack=self.attack_time, attack_curve=0.0,
                                  hold=0.0, decay=0.0, decay_falloff=0.0, sustain=0.0,
                                  release=self.release_time, release_falloff=0.0)
        return block


@register_modulator
@dataclass
class PitchTrackerModulator(Modulator):
    """Notes are MIDI note numbers."""
    mode = ModulatorMode.PITCH_TRACKER
    BLOCK_FIELDS = _fields(_RANGE_DEPTH, audio_source='audio_source',
                           lowest_note='pitch_tracker_lowest', root_note='pitch_tracker_root',
                           highest_note='pitch_tracker_highest',
                           sensitivity='pitch_tracker_sensitivity')

    depth: float = 1.0
    output_range: OutputRange = OutputRange.UNIPOLAR
    audio_source: AudioSourceId = AUDIO_SOURCE_MASTER
    sensitivity: float = 0.0
    lowest_note: int = 36
    root_note: int = 69
    highest_note: int = 84


@register_modulator
@dataclass
class MidiCcModulator(Modulator):
    mode = ModulatorMode.MIDI_CC
    BLOCK_FIELDS = _fields(_RANGE_DEPTH, controller_slot='controller_slot')

    output_range: OutputRange = OutputRange.UNIPOLAR
    depth: float = 1.0
    controller_slot: Optional[int] = None


@register_modulator
@dataclass
class VelocityModulator(Modulator):
    mode = ModulatorMode.VELOCITY
    BLOCK_FIELDS = _fields(_RANGE_DEPTH, trigger_mode='velocity_trigger_mode')

    output_range: OutputRange = OutputRange.UNIPOLAR
    depth: float = 1.0
    trigger_mode: VelocityTriggerMode = VelocityTriggerMode.STRIKE


@register_modulator
@dataclass
class NoteModulator(Modulator):
    """Note range is a number of notes, between 12 and 120."""
    mode = ModulatorMode.NOTE
    BLOCK_FIELDS = _fields(_RANGE_DEPTH, note_range='note_range', root_note='root_note')

    output_range: OutputRange = OutputRange.UNIPOLAR
    depth: float = 1.0
    root_note: int = 69
    note_range: int = 120


@register_modulator
@dataclass
class NoteGateModulator(Modulator):
    mode = ModulatorMode.NOTE_GATE
    BLOCK_FIELDS = _fields(_RANGE_DEPTH)

    output_range: OutputRange = OutputRange.UNIPOLAR
    depth: float = 1.0


@register_modulator
@dataclass
class PressureModulator(Modulator):
    mode = ModulatorMode.PRESSURE
    BLOCK_FIELDS = _fields(_RANGE_DEPTH)

    output_range: OutputRange = OutputRange.UNIPOLAR
    depth: float = 1.0


@register_modulator
@dataclass
class PitchWheelModulator(Modulator):
    mode = ModulatorMode.PITCH_WHEEL
    BLOCK_FIELDS = _fields(_RANGE_DEPTH)

    output_range: OutputRange = OutputRange.BIPOLAR
    depth: float = 1.0


@register_modulator
@dataclass
class MpeTimbreModulator(Modulator):
    mode = ModulatorMode.MPE_TIMBRE
    BLOCK_FIELDS = _fields(_RANGE_DEPTH)

    output_range: OutputRange = OutputRange.BIPOLAR
    depth: float = 1.0


@register_modulator
@dataclass
class SampleAndHoldModulator(Modulator):
    mode = ModulatorMode.SAMPLE_AND_HOLD
    BLOCK_FIELDS = _fields(_TRIGGER, _INPUTS, depth='depth')

    depth: float = 1.0
    note_trigger_mode: NoteTriggerMode = NoteTriggerMode.AUTO
    trigger_threshold: float = 0.5
    input_a: float = 0.0
    input_b: float = 0.0


@register_modulator
@dataclass
class ScaleModulator(Modulator):
    mode = ModulatorMode.SCALE
    BLOCK_FIELDS = _fields(_RANGE_DEPTH, _INPUTS, multiplier='multiplier')

    output_range: OutputRange = OutputRange.UNIPOLAR
    input_a: float = 0.0
    input_b: float = 0.0
    multiplier: float = 1.0
    depth: float = 1.0


@register_modulator
@dataclass
class LowerLimitModulator(Modulator):
    """Outputs whichever of input A and input B is lower."""
    mode = ModulatorMode.LOWER_LIMIT
    BLOCK_FIELDS = _fields(_RANGE_DEPTH, _INPUTS)

    output_range: OutputRange = OutputRange.BIPOLAR
    input_a: float = 0.0
    input_b: float = 0.0
    depth: float = 1.0


@register_modulator
@dataclass
class UpperLimitModulator(Modulator):
    """Outputs whichever of input A and input B is higher."""
    mode = ModulatorMode.UPPER_LIMIT
    BLOCK_FIELDS = _fields(_RANGE_DEPTH, _INPUTS)

    output_range: OutputRange = OutputRange.BIPOLAR
    input_a: float = 0.0
    input_b: float = 0.0
    depth: float = 1.0


@register_modulator
@dataclass
class RemapModulator(Modulator):
    """Remap only offers unipolar and bipolar output."""
    mode = ModulatorMode.REMAP
    BLOCK_FIELDS = _fields(_SHAPE, depth='depth')

    bipolar: bool = False
    depth: float = 1.0
    shape: List[CurvePoint] = field(default_factory=default_curve)
    shape_name: Optional[str] = None
    shape_path: Optional[str] = None
    shape_edited: bool = False

    @classmethod
    def from_block(cls, block: ModulatorBlock) -> 'RemapModulator':
        modulator = super().from_block(block)
        modulator.bipolar = block.output_range is OutputRange.BIPOLAR
        return modulator

    def to_block(self) -> ModulatorBlock:
        block = super().to_block()
        block.output_range = OutputRange.BIPOLAR if self.bipolar else OutputRange.UNIPOLAR
        return block


@register_modulator
@dataclass
class SlewLimiterModulator(Modulator):
    """Attack and decay are seconds. Added in Phase Plant 2.0.12."""
    mode = ModulatorMode.SLEW_LIMITER
    BLOCK_FIELDS = {'attack': 'slew_limiter_attack', 'decay': 'slew_limiter_decay',
                    'linked': 'slew_limiter_linked'}

    attack: float = 0.1
    decay: float = 0.1
    linked: bool = True

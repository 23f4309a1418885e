"""
Generators

Oscillators, samplers, noise, routing and output nodes of the generator
section.

Every generator is stored in the same fixed 200 byte record followed by
fields spread over later tables of the preset. GeneratorBlock holds the union
of all those fields; the typed generator kinds expose only what their mode
uses and convert to and from a block through an attribute map.

Phase Plant also has a nonlinear filter generator, but presets up to 2.1
give it no generator mode id of its own, so it cannot appear in a file and
has no kind here. Its effect is available as a snapin.
"""

import copy
import logging
from dataclasses import dataclass, field
from typing import ClassVar, Dict, List, Optional, Type

from .effects.distortion import Distortion, DistortionMode
from .effects.filters import Filter, FilterMode
from .errors import PhasePlantError, RangeError
from .stream import PresetWriter
from .values import (CurvePoint, Decibels, Envelope, LoopMode, Rate, Unison,
                     WireEnum, default_curve)

logger = logging.getLogger(__name__)

GENERATORS_MAX = 32


# ==============================================================================
# Enumerations
# ==============================================================================

class GeneratorMode(WireEnum):
    BLANK = 0
    GROUP = 1
    ANALOG_OSCILLATOR = 2
    NOISE_GENERATOR = 3
    SAMPLE_PLAYER = 4
    WAVETABLE_OSCILLATOR = 5
    DISTORTION_EFFECT = 6
    FILTER_EFFECT = 7
    AUX_ROUTING = 8
    MIX_ROUTING = 9
    ENVELOPE_OUTPUT = 10
    CURVE_OUTPUT = 11
    # Added in Phase Plant 2.1
    GRANULAR_GENERATOR = 12

    @property
    def label(self) -> str:
        return _GENERATOR_LABELS[self]

    @property
    def is_blank(self) -> bool:
        return self is GeneratorMode.BLANK


_GENERATOR_LABELS = {
    GeneratorMode.BLANK: 'Blank',
    GeneratorMode.GROUP: 'Group',
    GeneratorMode.ANALOG_OSCILLATOR: 'Analog',
    GeneratorMode.NOISE_GENERATOR: 'Noise',
    GeneratorMode.SAMPLE_PLAYER: 'Sampler',
    GeneratorMode.WAVETABLE_OSCILLATOR: 'Wavetable',
    GeneratorMode.DISTORTION_EFFECT: 'Distortion',
    GeneratorMode.FILTER_EFFECT: 'Filter',
    GeneratorMode.AUX_ROUTING: 'Aux',
    GeneratorMode.MIX_ROUTING: 'Mix',
    GeneratorMode.ENVELOPE_OUTPUT: 'Envelope',
    GeneratorMode.CURVE_OUTPUT: 'Curve',
    GeneratorMode.GRANULAR_GENERATOR: 'Granular',
}


class OutputDestination(WireEnum):
    """Where an output generator sends its audio.

    Not the same numbering as the lane destinations.
    """
    NONE = 0
    LANE1 = 1
    LANE2 = 2
    LANE3 = 3
    MASTER = 4
    SIDEBAND = 5

    @property
    def label(self) -> str:
        return self.name.title().replace('Lane', 'Lane ')


class AnalogWaveform(WireEnum):
    SAW = 0
    SQUARE = 1
    TRIANGLE = 2
    SINE = 3


class NoiseWaveform(WireEnum):
    COLORED = 0
    KEYTRACKED_STEPPED = 1
    KEYTRACKED_SMOOTH = 2


class SeedMode(WireEnum):
    STABLE = 0
    RANDOM = 1


class GranularDirection(WireEnum):
    START = 0
    MIDPOINT = 1


class GranularSpawnRateMode(WireEnum):
    RATE = 0
    SYNC = 1
    DENSITY = 2


class GranularChordMode(WireEnum):
    OCTAVES = 0
    FIFTHS = 1
    MINOR = 2
    MINOR_MIN7 = 3
    MINOR_MAJ7 = 4
    MAJOR = 5
    MAJOR_MIN7 = 6
    MAJOR_MAJ7 = 7
    SUS2 = 8
    SUS4 = 9
    DIM = 10
    DIM7 = 11
    PENTATONIC_MAJ = 12
    PENTATONIC_MINOR = 13


class ChordPickingPattern(WireEnum):
    UP = 0
    DOWN = 1
    UP_DOWN = 2
    RANDOM = 3


# ==============================================================================
# Granular settings
# ==============================================================================

@dataclass
class GranularRandomization:
    """Per grain variation. Pitch is in Hz, the rest are ratios."""
    position: float = 0.0
    timing: float = 0.0
    pitch: float = 0.0
    pan: float = 0.0
    level: float = 0.0
    reverse: float = 0.0


@dataclass
class GranularEnvelope:
    """Grain window. Times are fractions of the grain length."""
    attack_time: float = 0.25
    attack_curve: float = 0.0
    decay_time: float = 0.25
    decay_curve: float = 0.0


@dataclass
class GranularChord:
    enabled: bool = False
    mode: GranularChordMode = GranularChordMode.MAJOR
    picking_pattern: ChordPickingPattern = ChordPickingPattern.RANDOM
    range_octaves: float = 1.0


GRANULAR_BLOCK_SIZE = 80


def _generator_filter() -> Filter:
    return Filter(cutoff=440.0, gain=Decibels.ZERO)


def _generator_distortion() -> Distortion:
    return Distortion(drive=Decibels.from_linear(1.0), dynamics=0.0)


# ==============================================================================
# Generator block
# ==============================================================================

@dataclass
class GeneratorBlock:
    """Every field any generator stores, in the units of the file.

    The defaults match the blank areas of the init preset.
    """
    id: int = 0
    mode: GeneratorMode = GeneratorMode.BLANK
    enabled: bool = True
    minimized: bool = False
    name: Optional[str] = None
    settings_locked: bool = False

    fine_tuning: float = 0.0
    harmonic: float = 1.0
    shift: float = 0.0
    rate: Rate = field(default_factory=lambda: Rate(frequency=100.0))
    phase_offset: float = 0.0
    phase_jitter: float = 0.0
    level: float = 1.0
    unison: Unison = field(default_factory=Unison)

    analog_waveform: AnalogWaveform = AnalogWaveform.SAW
    sync_multiplier: float = 1.0
    pulse_width: float = 0.5

    offset_position: float = 0.0
    offset_locked: bool = False
    loop_start_position: float = 0.0
    loop_locked: bool = False
    loop_length: float = 0.0
    loop_enabled: bool = False
    crossfade_amount: float = 0.0

    invert: bool = False
    filter_effect: Filter = field(default_factory=_generator_filter)
    distortion_effect: Distortion = field(default_factory=_generator_distortion)
    band_limit: float = 22050.0
    mix_level: float = 1.0

    noise_waveform: NoiseWaveform = NoiseWaveform.COLORED
    noise_slope: Decibels = Decibels(3.0103)
    stereo: float = 0.0
    seed_mode: SeedMode = SeedMode.STABLE

    pan: float = 0.0
    output_enabled: bool = True
    output_gain: Decibels = Decibels.from_linear(0.25)
    output_destination: OutputDestination = OutputDestination.LANE1
    envelope: Envelope = field(default_factory=Envelope)

    wavetable_contents: bytes = field(default=b'', repr=False)
    wavetable_edited: bool = False
    wavetable_frame: float = 0.0
    wavetable_name: Optional[str] = None
    wavetable_path: Optional[str] = None

    curve: List[CurvePoint] = field(default_factory=list)
    curve_edited: bool = False
    curve_length: float = 1.0
    curve_name: Optional[str] = None
    curve_path: Optional[str] = None
    curve_loop_mode: LoopMode = LoopMode.OFF
    curve_loop_start: float = 0.0
    curve_loop_length: float = 1.0

    sample_contents: bytes = field(default=b'', repr=False)
    sample_name: Optional[str] = None
    sample_path: Optional[str] = None
    sample_loop_mode: LoopMode = LoopMode.INFINITE
    base_pitch: float = 60.0
    base_pitch_locked: bool = False

    granular_position: float = 0.0
    granular_direction: GranularDirection = GranularDirection.START
    granular_envelope: GranularEnvelope = field(default_factory=GranularEnvelope)
    granular_align_phases: bool = False
    granular_grains: float = 1.0
    granular_grain_length: float = 0.25
    granular_auto_grain_length: bool = True
    granular_spawn_rate_mode: GranularSpawnRateMode = GranularSpawnRateMode.DENSITY
    granular_randomization: GranularRandomization = field(default_factory=GranularRandomization)
    granular_chord: GranularChord = field(default_factory=GranularChord)
    granular_warm_start: bool = False

    SIZE: ClassVar[int] = 200

    @classmethod
    def blank(cls) -> 'GeneratorBlock':
        """Padding slot. Its defaults differ slightly from a used block."""
        return cls(envelope=Envelope(decay=0.001),
                   output_destination=OutputDestination.NONE,
                   unison=Unison(voices=1))

    # --- Fixed record ---------------------------------------------------------

    @classmethod
    def read(cls, reader, index: int) -> 'GeneratorBlock':
        start = reader.pos
        block = cls()
        block.mode = reader.read_enum(GeneratorMode)
        block.id = reader.read_u32()
        if block.id > GENERATORS_MAX:
            raise RangeError(
                f"Generator {index} has an ID of {block.id}, which is greater than "
                f"{GENERATORS_MAX} at position {start + 4}")
        block.enabled = reader.read_bool32()
        block.fine_tuning = reader.read_f32()
        block.harmonic = reader.read_f32()
        block.shift = reader.read_f32()
        block.level = reader.read_f32()
        block.phase_offset = reader.read_f32()
        block.phase_jitter = reader.read_f32()
        block.unison = Unison(voices=reader.read_u32(),
                              detune=reader.read_f32(),
                              spread=reader.read_f32(),
                              blend=reader.read_f32())
        block.base_pitch = reader.read_f32()
        block.offset_position = reader.read_f32()
        block.sample_loop_mode = reader.read_enum(LoopMode)
        block.loop_start_position = reader.read_f32()
        block.loop_length = reader.read_f32()
        block.crossfade_amount = reader.read_f32()
        block.wavetable_frame = reader.read_f32()
        block.band_limit = reader.read_f32()
        block.analog_waveform = reader.read_enum(AnalogWaveform)
        block.sync_multiplier = reader.read_f32()
        block.pulse_width = reader.read_f32()
        block.seed_mode = SeedMode.RANDOM if reader.read_bool32() else SeedMode.STABLE
        block.noise_slope = reader.read_decibels_db()
        block.stereo = reader.read_f32()
        block.noise_waveform = reader.read_enum(NoiseWaveform)

        block.filter_effect = Filter(filter_mode=reader.read_enum(FilterMode),
                                     cutoff=reader.read_f32(),
                                     q=reader.read_f32(),
                                     gain=reader.read_decibels_linear())
        # Dynamics and spread are not exposed by the generator
        block.distortion_effect = Distortion(distortion_mode=reader.read_enum(DistortionMode),
                                             drive=reader.read_decibels_linear(),
                                             bias=reader.read_f32(),
                                             mix=reader.read_f32(),
                                             dynamics=0.0)

        block.invert = reader.read_bool32()
        block.mix_level = reader.read_f32()
        block.output_gain = reader.read_decibels_linear()
        block.pan = reader.read_f32()
        block.output_destination = reader.read_enum(OutputDestination)
        block.envelope = reader.read_envelope()

        remaining = cls.SIZE - (reader.pos - start)
        if remaining != 0:
            raise PhasePlantError(
                f"Generator {index} starting at {start} had {remaining} bytes remaining")
        if not block.mode.is_blank:
            logger.debug("Generator %d: %s id %d at position %d",
                         index, block.mode.label, block.id, start)
        return block

    def write(self, writer):
        writer.write_enum(self.mode)
        writer.write_u32(self.id)
        writer.write_bool32(self.enabled)
        writer.write_f32(self.fine_tuning)
        writer.write_f32(self.harmonic)
        writer.write_f32(self.shift)
        writer.write_f32(self.level)
        writer.write_f32(self.phase_offset)
        writer.write_f32(self.phase_jitter)
        writer.write_u32(self.unison.voices)
        writer.write_f32(self.unison.detune)
        writer.write_f32(self.unison.spread)
        writer.write_f32(self.unison.blend)
        writer.write_f32(self.base_pitch)
        writer.write_f32(self.offset_position)
        writer.write_enum(self.sample_loop_mode)
        writer.write_f32(self.loop_start_position)
        writer.write_f32(self.loop_length)
        writer.write_f32(self.crossfade_amount)
        writer.write_f32(self.wavetable_frame)
        writer.write_f32(self.band_limit)
        writer.write_enum(self.analog_waveform)
        writer.write_f32(self.sync_multiplier)
        writer.write_f32(self.pulse_width)
        writer.write_bool32(self.seed_mode is SeedMode.RANDOM)
        writer.write_decibels_db(self.noise_slope)
        writer.write_f32(self.stereo)
        writer.write_enum(self.noise_waveform)

        writer.write_enum(self.filter_effect.filter_mode)
        writer.write_f32(self.filter_effect.cutoff)
        writer.write_f32(self.filter_effect.q)
        writer.write_decibels_linear(self.filter_effect.gain)
        writer.write_enum(self.distortion_effect.distortion_mode)
        writer.write_decibels_linear(self.distortion_effect.drive)
        writer.write_f32(self.distortion_effect.bias)
        writer.write_f32(self.distortion_effect.mix)

        writer.write_bool32(self.invert)
        writer.write_f32(self.mix_level)
        writer.write_decibels_linear(self.output_gain)
        writer.write_f32(self.pan)
        writer.write_enum(self.output_destination)
        writer.write_envelope(self.envelope)

    # --- Granular table -------------------------------------------------------

    def read_granular(self, reader):
        start = reader.pos
        self.granular_position = reader.read_f32()
        self.granular_direction = reader.read_enum(GranularDirection)
        self.granular_grains = reader.read_f32()
        randomization = self.granular_randomization
        randomization.position = reader.read_f32()
        randomization.timing = reader.read_f32()
        randomization.pitch = reader.read_f32()
        randomization.pan = reader.read_f32()
        randomization.level = reader.read_f32()
        randomization.reverse = reader.read_f32()
        self.granular_align_phases = reader.read_bool32()
        self.granular_warm_start = reader.read_bool32()
        self.granular_auto_grain_length = reader.read_bool32()
        self.granular_envelope = GranularEnvelope(attack_time=reader.read_f32(),
                                                  attack_curve=reader.read_f32(),
                                                  decay_time=reader.read_f32(),
                                                  decay_curve=reader.read_f32())
        self.granular_grain_length = reader.read_f32()
        self.granular_chord.enabled = reader.read_bool32()
        self.granular_chord.range_octaves = reader.read_f32()
        self.granular_chord.mode = reader.read_enum(GranularChordMode)
        if reader.pos - start != GRANULAR_BLOCK_SIZE:
            raise PhasePlantError(
                f"Granular block read {reader.pos - start} bytes instead of {GRANULAR_BLOCK_SIZE}")

    def write_granular(self, writer):
        writer.write_f32(self.granular_position)
        writer.write_enum(self.granular_direction)
        writer.write_f32(self.granular_grains)
        randomization = self.granular_randomization
        for value in (randomization.position, randomization.timing, randomization.pitch,
                      randomization.pan, randomization.level, randomization.reverse):
            writer.write_f32(value)
        writer.write_bool32(self.granular_align_phases)
        writer.write_bool32(self.granular_warm_start)
        writer.write_bool32(self.granular_auto_grain_length)
        envelope = self.granular_envelope
        writer.write_f32(envelope.attack_time)
        writer.write_f32(envelope.attack_curve)
        writer.write_f32(envelope.decay_time)
        writer.write_f32(envelope.decay_curve)
        writer.write_f32(self.granular_grain_length)
        writer.write_bool32(self.granular_chord.enabled)
        writer.write_f32(self.granular_chord.range_octaves)
        writer.write_enum(self.granular_chord.mode)

    # --- Data blocks ----------------------------------------------------------

    def read_sample_block(self, reader, index: int):
        start = reader.pos
        header = reader.read_block_header()
        end = reader.pos + header.data_length
        if header.is_used:
            self.sample_path = reader.read_string()
            if header.mode_id == 3:
                reader.expect_u8(0, 'sample_player_contents')
            elif header.mode_id not in (1, 2):
                raise PhasePlantError(
                    f"Unknown sample player data block mode {header.mode_id} at position {start + 5}")
            if reader.pos != end:
                self.sample_contents = reader.read_bytes(reader.read_u32())
        if reader.pos != end:
            raise PhasePlantError(
                f"Sample data block of generator {index} had {end - reader.pos} bytes "
                f"remaining at position {reader.pos}")

    def write_sample_block(self, writer):
        if not self.sample_path and not self.sample_contents:
            writer.write_unused_block()
            return
        data = PresetWriter()
        data.write_string(self.sample_path)
        if self.sample_contents:
            data.write_u32(len(self.sample_contents))
            data.write_bytes(self.sample_contents)
        writer.write_data_block(2, data.getvalue())

    def read_wavetable_block(self, reader, index: int):
        start = reader.pos
        header = reader.read_block_header()
        end = reader.pos + header.data_length
        if header.is_used:
            if header.mode_id not in (1, 3):
                raise PhasePlantError(
                    f"Unknown wavetable data block mode {header.mode_id} at position {start + 5}")
            self.wavetable_path = reader.read_string()
            if header.mode_id == 3:
                self.wavetable_edited = reader.read_bool8()
            if reader.pos != end:
                self.wavetable_contents = reader.read_bytes(reader.read_u32())
        if reader.pos != end:
            raise PhasePlantError(
                f"Wavetable data block of generator {index} starting at {start} had "
                f"{end - reader.pos} bytes remaining")

    def write_wavetable_block(self, writer):
        if not self.wavetable_path and not self.wavetable_contents:
            writer.write_unused_block()
            return
        data = PresetWriter()
        data.write_string(self.wavetable_path)
        data.write_bool8(self.wavetable_edited)
        if self.wavetable_contents:
            data.write_u32(len(self.wavetable_contents))
            data.write_bytes(self.wavetable_contents)
        writer.write_data_block(3, data.getvalue())

    def read_curve_block(self, reader):
        start = reader.pos
        header = reader.read_block_header()
        end = reader.pos + header.data_length
        if header.is_used and self.mode is GeneratorMode.CURVE_OUTPUT:
            self.curve = reader.read_curve_points()
        elif header.is_used:
            reader.skip(header.data_length)
        if reader.pos != end:
            raise PhasePlantError(
                f"Curve output data block starting at {start} had {end - reader.pos} bytes remaining")

    def write_curve_block(self, writer):
        if self.mode is not GeneratorMode.CURVE_OUTPUT or not self.curve:
            writer.write_unused_block()
            return
        data = PresetWriter()
        data.write_curve_points(self.curve)
        writer.write_data_block(1, data.getvalue())


# ==============================================================================
# Generator kinds
# ==============================================================================

_GENERATOR_KINDS: Dict[GeneratorMode, Type['Generator']] = {}


def register_generator(cls):
    _GENERATOR_KINDS[cls.mode] = cls
    return cls


@dataclass
class Generator:
    """Base of the typed generators.

    ``BLOCK_FIELDS`` maps attribute names of the kind onto GeneratorBlock
    attributes. A name of None means the mode label is shown instead.
    """
    mode: ClassVar[GeneratorMode]
    BLOCK_FIELDS: ClassVar[Dict[str, str]] = {}

    id: int = 0
    enabled: bool = True
    name: Optional[str] = None
    minimized: bool = False

    @property
    def display_name(self) -> str:
        return self.name or self.mode.label

    @classmethod
    def from_block(cls, block: GeneratorBlock) -> 'Generator':
        values = {attr: copy.deepcopy(getattr(block, block_attr))
                  for attr, block_attr in cls.BLOCK_FIELDS.items()}
        return cls(id=block.id, enabled=block.enabled, name=block.name,
                   minimized=block.minimized, **values)

    def _block_defaults(self) -> GeneratorBlock:
        return GeneratorBlock(mode=self.mode)

    def to_block(self) -> GeneratorBlock:
        block = self._block_defaults()
        block.id = self.id
        block.enabled = self.enabled
        block.name = self.name
        block.minimized = self.minimized
        for attr, block_attr in self.BLOCK_FIELDS.items():
            setattr(block, block_attr, copy.deepcopy(getattr(self, attr)))
        return block


def generator_from_block(block: GeneratorBlock) -> Generator:
    return _GENERATOR_KINDS[block.mode].from_block(block)


_PHASES = {
    'shift': 'shift',
    'phase_offset': 'phase_offset',
    'phase_jitter': 'phase_jitter',
    'level': 'level',
}


@register_generator
@dataclass
class BlankGenerator(Generator):
    """Placeholder for an empty slot between used ones."""
    mode = GeneratorMode.BLANK

    def _block_defaults(self) -> GeneratorBlock:
        return GeneratorBlock.blank()


@register_generator
@dataclass
class Group(Generator):
    """Generators after a group belong to it until the next group."""
    mode = GeneratorMode.GROUP


@register_generator
@dataclass
class AnalogOscillator(Generator):
    mode = GeneratorMode.ANALOG_OSCILLATOR
    BLOCK_FIELDS = dict(_PHASES, tuning='fine_tuning', harmonic='harmonic',
                        pulse_width='pulse_width', sync_multiplier='sync_multiplier',
                        unison='unison', waveform='analog_waveform')

    tuning: float = 0.0
    harmonic: float = 1.0
    shift: float = 0.0
    phase_offset: float = 0.0
    phase_jitter: float = 0.0
    level: float = 1.0
    pulse_width: float = 0.5
    sync_multiplier: float = 1.0
    unison: Unison = field(default_factory=Unison)
    waveform: AnalogWaveform = AnalogWaveform.SAW


@register_generator
@dataclass
class NoiseGenerator(Generator):
    mode = GeneratorMode.NOISE_GENERATOR
    BLOCK_FIELDS = dict(_PHASES, semi_cent='fine_tuning', harmonic='harmonic',
                        waveform='noise_waveform', slope='noise_slope',
                        stereo='stereo', seed_mode='seed_mode')

    semi_cent: float = 0.0
    # Other generators default to 1
    harmonic: float = 4.0
    shift: float = 0.0
    phase_offset: float = 0.0
    phase_jitter: float = 0.0
    level: float = 1.0
    waveform: NoiseWaveform = NoiseWaveform.COLORED
    slope: Decibels = Decibels(3.0103)
    stereo: float = 0.0
    seed_mode: SeedMode = SeedMode.STABLE


@register_generator
@dataclass
class SamplePlayer(Generator):
    """Plays a sample. Without contents the sample is a factory sample."""
    mode = GeneratorMode.SAMPLE_PLAYER
    BLOCK_FIELDS = dict(_PHASES, semi_cent='fine_tuning', harmonic='harmonic',
                        unison='unison',
                        offset_locked='offset_locked', offset_position='offset_position',
                        loop_locked='loop_locked', loop_start_position='loop_start_position',
                        loop_length='loop_length', loop_enabled='loop_enabled',
                        loop_mode='sample_loop_mode', crossfade_amount='crossfade_amount',
                        sample_contents='sample_contents', sample_name='sample_name',
                        sample_path='sample_path', base_pitch='base_pitch',
                        base_pitch_locked='base_pitch_locked')

    semi_cent: float = 0.0
    harmonic: float = 1.0
    shift: float = 0.0
    phase_offset: float = 0.0
    phase_jitter: float = 0.0
    level: float = 1.0
    unison: Unison = field(default_factory=Unison)
    offset_locked: bool = False
    offset_position: float = 0.0
    loop_locked: bool = False
    loop_start_position: float = 0.5
    loop_length: float = 0.25
    loop_enabled: bool = False
    loop_mode: LoopMode = LoopMode.INFINITE
    crossfade_amount: float = 0.01
    sample_contents: bytes = field(default=b'', repr=False)
    sample_name: Optional[str] = None
    sample_path: Optional[str] = None
    base_pitch: float = 60.0
    base_pitch_locked: bool = False


@register_generator
@dataclass
class WavetableOscillator(Generator):
    mode = GeneratorMode.WAVETABLE_OSCILLATOR
    BLOCK_FIELDS = dict(_PHASES, tuning='fine_tuning', harmonic='harmonic',
                        frame='wavetable_frame', band_limit='band_limit', unison='unison',
                        wavetable_contents='wavetable_contents',
                        wavetable_edited='wavetable_edited',
                        wavetable_name='wavetable_name', wavetable_path='wavetable_path')

    tuning: float = 0.0
    harmonic: float = 1.0
    shift: float = 0.0
    phase_offset: float = 0.0
    phase_jitter: float = 0.0
    level: float = 1.0
    frame: float = 0.0
    band_limit: float = 22050.0
    unison: Unison = field(default_factory=Unison)
    wavetable_contents: bytes = field(default=b'', repr=False)
    wavetable_edited: bool = False
    wavetable_name: Optional[str] = None
    wavetable_path: Optional[str] = None


@register_generator
@dataclass
class GranularGenerator(Generator):
    """Granular sample playback, added in Phase Plant 2.1."""
    mode = GeneratorMode.GRANULAR_GENERATOR
    BLOCK_FIELDS = dict(_PHASES, fine_tuning='fine_tuning', harmonic='harmonic',
                        sample_contents='sample_contents', sample_name='sample_name',
                        sample_path='sample_path', base_pitch='base_pitch',
                        base_pitch_locked='base_pitch_locked',
                        position='granular_position', direction='granular_direction',
                        envelope='granular_envelope', align_phases='granular_align_phases',
                        grains='granular_grains', grain_length='granular_grain_length',
                        auto_grain_length='granular_auto_grain_length',
                        spawn_rate_mode='granular_spawn_rate_mode',
                        randomization='granular_randomization', chord='granular_chord',
                        warm_start='granular_warm_start')

    fine_tuning: float = 0.0
    harmonic: float = 1.0
    shift: float = 0.0
    phase_offset: float = 0.0
    phase_jitter: float = 0.0
    level: float = 1.0
    sample_contents: bytes = field(default=b'', repr=False)
    sample_name: Optional[str] = None
    sample_path: Optional[str] = None
    base_pitch: float = 60.0
    base_pitch_locked: bool = False
    position: float = 0.025
    direction: GranularDirection = GranularDirection.START
    envelope: GranularEnvelope = field(default_factory=GranularEnvelope)
    align_phases: bool = False
    grains: float = 4.0
    grain_length: float = 0.25
    auto_grain_length: bool = True
    spawn_rate_mode: GranularSpawnRateMode = GranularSpawnRateMode.DENSITY
    randomization: GranularRandomization = field(default_factory=GranularRandomization)
    chord: GranularChord = field(default_factory=GranularChord)
    warm_start: bool = False


@register_generator
@dataclass
class FilterEffect(Generator):
    mode = GeneratorMode.FILTER_EFFECT
    BLOCK_FIELDS = {'effect': 'filter_effect'}

    effect: Filter = field(default_factory=_generator_filter)


@register_generator
@dataclass
class DistortionEffect(Generator):
    mode = GeneratorMode.DISTORTION_EFFECT
    BLOCK_FIELDS = {'effect': 'distortion_effect'}

    effect: Distortion = field(default_factory=_generator_distortion)


@register_generator
@dataclass
class AuxRouting(Generator):
    mode = GeneratorMode.AUX_ROUTING
    BLOCK_FIELDS = {'invert': 'invert', 'level': 'mix_level'}

    invert: bool = False
    level: float = 1.0


@register_generator
@dataclass
class MixRouting(Generator):
    mode = GeneratorMode.MIX_ROUTING
    BLOCK_FIELDS = {'invert': 'invert', 'level': 'mix_level'}

    invert: bool = False
    level: float = 1.0


def _output_envelope() -> Envelope:
    return Envelope(delay=0.0, attack=0.001, attack_curve=0.5, hold=0.0, decay=0.1,
                    decay_falloff=0.75, sustain=0.0, release=0.005, release_falloff=0.75)


@register_generator
@dataclass
class EnvelopeOutput(Generator):
    mode = GeneratorMode.ENVELOPE_OUTPUT
    BLOCK_FIELDS = {'output_enabled': 'output_enabled', 'gain': 'output_gain', 'pan': 'pan',
                    'destination': 'output_destination', 'envelope': 'envelope'}

    output_enabled: bool = True
    gain: Decibels = Decibels.from_linear(0.25)
    pan: float = 0.0
    destination: OutputDestination = OutputDestination.LANE1
    envelope: Envelope = field(default_factory=_output_envelope)


@register_generator
@dataclass
class CurveOutput(Generator):
    """Plays a drawn curve as audio. Loop start and length are ratios."""
    mode = GeneratorMode.CURVE_OUTPUT
    BLOCK_FIELDS = {'output_enabled': 'output_enabled', 'gain': 'output_gain', 'pan': 'pan',
                    'rate': 'rate', 'destination': 'output_destination',
                    'loop_mode': 'curve_loop_mode', 'loop_start': 'curve_loop_start',
                    'loop_length': 'curve_loop_length', 'settings_locked': 'settings_locked',
                    'curve': 'curve', 'curve_edited': 'curve_edited',
                    'curve_length': 'curve_length', 'curve_name': 'curve_name',
                    'curve_path': 'curve_path'}

    output_enabled: bool = True
    gain: Decibels = Decibels.from_linear(0.25)
    pan: float = 0.0
    rate: Rate = field(default_factory=lambda: Rate(frequency=100.0))
    destination: OutputDestination = OutputDestination.LANE1
    loop_mode: LoopMode = LoopMode.OFF
    loop_start: float = 0.0
    loop_length: float = 1.0
    settings_locked: bool = False
    curve: List[CurvePoint] = field(default_factory=default_curve)
    curve_edited: bool = False
    curve_length: float = 1.0
    curve_name: Optional[str] = None
    curve_path: Optional[str] = None

"""
Preset

The top level document: lanes of snapins, generators, modulators, the
modulation routing table and the macro controls.

Generators and modulators are stored in fixed tables of 32 slots whose
fields are spread across the file. Reading collects every slot into a
GeneratorBlock or ModulatorBlock first and converts the blocks to typed
values once the whole file has been read. Writing does the reverse and
always produces the Phase Plant 2.1 layout.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import BinaryIO, List, Optional, Tuple

from .errors import PhasePlantError, RangeError, VersionTooOldError
from .generators import (GENERATORS_MAX, ChordPickingPattern, Generator,
                         GeneratorBlock, GranularSpawnRateMode,
                         generator_from_block)
from .modulation import (MODULATIONS_MAX, Modulation, ModulationSource,
                         ModulationTarget)
from .modulators import (MODULATORS_MAX, NOTE_RANGE_MAX, NOTE_RANGE_MIN,
                         AudioSourceId, ModulatorBlock, ModulatorContainer,
                         VoiceMode)
from .snapin import Snapin, read_snapin, write_snapin
from .stream import PresetReader, PresetWriter
from .values import (MACRO_COUNT, LoopMode, MacroControl, Metadata, NoteValue,
                     OutputRange, Rate, Unison, UnisonMode, WireEnum)
from .version import (FORMAT_VERSION, MIN_SUPPORTED_RELEASE, PhasePlantRelease,
                      Version, is_likely_format_version)

logger = logging.getLogger(__name__)

LANE_COUNT = 3
BLOCK_Q_SIZE = 12
BLOCK_128_SIZE = 128
STRING_POOL_SIZE = 200


# ==============================================================================
# Lanes
# ==============================================================================

class LaneDestination(WireEnum):
    LANE2 = 2
    LANE3 = 0
    MASTER = 1
    LANE1 = 3
    SIDEBAND = 5

    @property
    def label(self) -> str:
        return _LANE_LABELS[self]


_LANE_LABELS = {
    LaneDestination.LANE1: "Lane 1",
    LaneDestination.LANE2: "Lane 2",
    LaneDestination.LANE3: "Lane 3",
    LaneDestination.MASTER: "Master",
    LaneDestination.SIDEBAND: "Sideband",
}


@dataclass
class Lane:
    """One of the three effect lanes."""
    destination: LaneDestination = LaneDestination.MASTER
    enabled: bool = True
    snapins: List[Snapin] = field(default_factory=list)
    # Number of snapins from the left that process each voice separately
    poly_count: int = 0
    mute: bool = False
    solo: bool = False
    gain: float = 1.0
    mix: float = 1.0

    @classmethod
    def defaults(cls) -> List['Lane']:
        return [cls(LaneDestination.LANE2), cls(LaneDestination.LANE3),
                cls(LaneDestination.MASTER)]

    def add(self, snapin: Snapin) -> Snapin:
        """Append a snapin, numbering its position."""
        snapin.position = len(self.snapins) + 1
        self.snapins.append(snapin)
        return snapin


# ==============================================================================
# Preserved words
# ==============================================================================

def _block_q_default() -> bytes:
    data = PresetWriter()
    data.write_u32(8)
    data.write_u32(4)
    data.write_u32(0)
    return data.getvalue()


@dataclass
class PresetUnknowns:
    """Words whose meaning is not known, kept per slot so a rewrite reproduces them.

    Slots missing from a list are written with the values Phase Plant stores
    for new presets.
    """
    generator_block_q: List[bytes] = field(default_factory=list)
    block_128: bytes = bytes(BLOCK_128_SIZE)
    modulator_block_f: List[Tuple[float, float]] = field(default_factory=list)
    generator_curve_flag: List[bool] = field(default_factory=list)
    lfo_table_time: List[float] = field(default_factory=list)

    @staticmethod
    def _slot(values: list, index: int, default):
        return values[index] if index < len(values) else default

    def block_q(self, index: int) -> bytes:
        return self._slot(self.generator_block_q, index, _block_q_default())

    def block_f(self, index: int) -> Tuple[float, float]:
        return self._slot(self.modulator_block_f, index, (0.0, 1.0))

    def curve_flag(self, index: int) -> bool:
        return self._slot(self.generator_curve_flag, index, False)

    def lfo_time(self, index: int) -> float:
        return self._slot(self.lfo_table_time, index, 1.0)


# ==============================================================================
# Preset
# ==============================================================================

@dataclass
class Preset:
    format_version: Version = FORMAT_VERSION
    metadata: Metadata = field(default_factory=Metadata)
    generators: List[Generator] = field(default_factory=list)
    modulators: List[ModulatorContainer] = field(default_factory=list)
    modulations: List[Modulation] = field(default_factory=list)
    lanes: List[Lane] = field(default_factory=Lane.defaults)
    macro_controls: List[MacroControl] = field(default_factory=MacroControl.defaults)
    unison: Unison = field(default_factory=Unison)

    master_gain: float = 1.0
    master_pitch: float = 0.0
    mod_wheel_value: float = 0.0
    polyphony: int = 8
    retrigger_enabled: bool = True
    glide_enabled: bool = False
    glide_legato: bool = False
    glide_time: float = 0.0

    unknowns: PresetUnknowns = field(default_factory=PresetUnknowns, repr=False)

    # --- Queries --------------------------------------------------------------

    def generator(self, index: int) -> Optional[Generator]:
        return self.generators[index] if 0 <= index < len(self.generators) else None

    def modulator(self, index: int) -> Optional[ModulatorContainer]:
        return self.modulators[index] if 0 <= index < len(self.modulators) else None

    def lane(self, index: int) -> Optional[Lane]:
        return self.lanes[index] if 0 <= index < len(self.lanes) else None

    def snapin(self, lane_index: int, index: int) -> Optional[Snapin]:
        lane = self.lane(lane_index)
        if lane is None or not 0 <= index < len(lane.snapins):
            return None
        return lane.snapins[index]

    def macro(self, index: int) -> Optional[MacroControl]:
        if 0 <= index < len(self.macro_controls):
            return self.macro_controls[index]
        return None

    # --- Files and streams ----------------------------------------------------

    @classmethod
    def read_file(cls, path: str) -> 'Preset':
        """Read a preset, naming it after the file when it carries no name."""
        with open(path, 'rb') as f:
            data = f.read()
        name = os.path.splitext(os.path.basename(path))[0]
        logger.info("Reading preset %s (%d bytes)", path, len(data))
        return cls.from_bytes(data, name)

    def write_file(self, path: str):
        data = self.to_bytes()
        with open(path, 'wb') as f:
            f.write(data)
        logger.info("Wrote preset %s (%d bytes)", path, len(data))

    @classmethod
    def read(cls, stream: BinaryIO, name: Optional[str] = None) -> 'Preset':
        return cls.from_bytes(stream.read(), name)

    def write(self, stream: BinaryIO):
        stream.write(self.to_bytes())

    @classmethod
    def from_bytes(cls, data: bytes, name: Optional[str] = None) -> 'Preset':
        return _PresetDecoder(PresetReader(data)).decode(name)

    def to_bytes(self) -> bytes:
        writer = PresetWriter()
        _PresetEncoder(self, writer).encode()
        return writer.getvalue()


# ==============================================================================
# Reading
# ==============================================================================

class _PresetDecoder:
    """Reads the tables of a preset in file order."""

    def __init__(self, reader: PresetReader):
        self.reader = reader
        self.preset = Preset()
        self.gen_blocks: List[GeneratorBlock] = []
        self.mod_blocks: List[ModulatorBlock] = []

    def decode(self, name: Optional[str]) -> Preset:
        reader = self.reader
        preset = self.preset
        self._read_header()
        preset.metadata = reader.read_metadata()
        if preset.metadata.name is None:
            preset.metadata.name = name
        reader.expect_bool32(True, 'unknown_read_1')

        self._read_modulations()
        reader.expect_u32(1, 'unknown_m3')
        self._read_lanes()
        for macro in preset.macro_controls:
            macro.value = reader.read_f32()

        logger.debug("Modulators at position %d", reader.pos)
        self.mod_blocks = [ModulatorBlock.read(reader, index) for index in range(MODULATORS_MAX)]
        if not reader.is_release_at_least(PhasePlantRelease.V1_7_0):
            reader.expect_u32(0, 'early_version_extra_1')

        preset.mod_wheel_value = reader.read_f32()
        preset.master_pitch = reader.read_f32()
        preset.polyphony = reader.read_u32()
        preset.retrigger_enabled = reader.read_bool32()
        preset.glide_enabled = reader.read_bool32()
        preset.glide_legato = reader.read_bool32()
        preset.glide_time = reader.read_f32()

        logger.debug("Generators at position %d", reader.pos)
        self.gen_blocks = [GeneratorBlock.read(reader, index) for index in range(GENERATORS_MAX)]

        unison_start = reader.pos
        unison_voices = reader.read_u32()
        if not 1 <= unison_voices <= Unison.VOICES_MAX:
            raise RangeError(
                f"Unexpected number of unison voices ({unison_voices}) at position {unison_start}")
        unison_detune = reader.read_f32()
        unison_spread = reader.read_f32()
        unison_blend = reader.read_f32()
        preset.master_gain = reader.read_f32()

        self._read_lane_states()
        for block in self.mod_blocks:
            block.minimized = reader.read_bool32()
        for block in self.gen_blocks:
            block.minimized = reader.read_bool32()
        reader.expect_u32(0, 'unknown_g1')

        self._read_release_1_tables()
        if reader.is_release_at_least(PhasePlantRelease.V1_8_5):
            preset.unison = self._read_unison_tables(
                unison_voices, unison_detune, unison_spread, unison_blend)
            for block in self.gen_blocks:
                block.loop_enabled = reader.read_bool32()
        else:
            preset.unison = Unison()
        logger.debug("Global unison %s", preset.unison)

        if reader.is_version_at_least_2_0():
            self._read_release_2_tables()
        if reader.is_release_at_least(PhasePlantRelease.V2_0_12):
            for block in self.mod_blocks:
                block.slew_limiter_attack = reader.read_f32()
                block.slew_limiter_decay = reader.read_f32()
        if reader.is_release_at_least(PhasePlantRelease.V2_0_13):
            for block in self.mod_blocks:
                block.slew_limiter_linked = reader.read_bool32()
        if reader.is_version_at_least_2_1():
            self._read_granular_tables()

        logger.debug("Lanes at position %d", reader.pos)
        for lane in preset.lanes:
            for index in range(reader.read_u32()):
                snapin = read_snapin(reader)
                if snapin.position != index + 1:
                    logger.warning("Snapin %s stored at position %d is number %d in its lane",
                                   snapin.name, snapin.position, index + 1)
                    snapin.position = index + 1
                lane.snapins.append(snapin)

        if reader.is_version_at_least_2_0():
            for block in self.mod_blocks:
                source_id = reader.read_u32()
                block.audio_source = AudioSourceId(source_id, reader.read_string() or "")

        self._read_string_pool()
        self._read_data_blocks()

        if reader.remaining():
            logger.warning("Expected end of file was not found at position %d, %d bytes remain",
                           reader.pos, reader.remaining())

        preset.modulators = [ModulatorContainer.from_block(block)
                             for block in _without_trailing_blanks(self.mod_blocks)]
        preset.generators = [generator_from_block(block)
                             for block in _without_trailing_blanks(self.gen_blocks)]
        return preset

    def _read_header(self):
        reader = self.reader
        major = reader.read_u32()
        patch = reader.read_u32()
        minor = reader.read_u32()
        version = Version(major, minor, patch)
        logger.debug("Preset format version %s", version)
        if not is_likely_format_version(version):
            if minor == 2 and patch >= 1010:
                raise VersionTooOldError(
                    f"Version {version} presets are not supported, the minimum is "
                    f"{MIN_SUPPORTED_RELEASE.format_version}")
            raise PhasePlantError("Not a Phase Plant preset")
        reader.format_version = version
        self.preset.format_version = version

    def _read_modulations(self):
        reader = self.reader
        start = reader.pos
        count = reader.read_u32()
        if count > MODULATIONS_MAX:
            raise RangeError(
                f"Modulation count of {count} is greater than {MODULATIONS_MAX} at position {start}")
        for _ in range(count):
            source = ModulationSource.from_id(reader.read_u32())
            target = ModulationTarget.from_id(reader.read_u32())
            amount = reader.read_f32()
            self.preset.modulations.append(Modulation(source, target, amount))
        reader.skip(12 * (MODULATIONS_MAX - count))
        logger.debug("Read %d modulations", count)

    def _read_lanes(self):
        reader = self.reader
        lanes = []
        for _ in range(LANE_COUNT):
            enabled = reader.read_bool32()
            gain = reader.read_f32()
            mix = reader.read_f32()
            destination = reader.read_enum(LaneDestination)
            lanes.append(Lane(destination, enabled, gain=gain, mix=mix))
        self.preset.lanes = lanes

    def _read_lane_states(self):
        reader = self.reader
        for index, lane in enumerate(self.preset.lanes):
            lane.poly_count = reader.read_u8()
            reader.expect_u8(0, 'lane_unknown_1')
            lane.mute = reader.read_bool8()
            reader.expect_u8(0, 'lane_unknown_2')
            lane.solo = reader.read_bool32()
            # The last lane has less padding
            if index < LANE_COUNT - 1:
                reader.expect_u8(0, 'lane_unknown_3')
                reader.expect_u8(0, 'lane_unknown_4')

    def _read_release_1_tables(self):
        reader = self.reader
        unknowns = self.preset.unknowns
        if reader.is_release_at_least(PhasePlantRelease.V1_7_3):
            unknowns.generator_block_q = [reader.read_bytes(BLOCK_Q_SIZE)
                                          for _ in range(GENERATORS_MAX)]
        if reader.is_release_at_least(PhasePlantRelease.V1_7_4):
            for block in self.gen_blocks:
                block.base_pitch_locked = reader.read_bool32()
                block.offset_locked = reader.read_bool32()
                block.loop_locked = reader.read_bool32()
        if reader.is_release_at_least(PhasePlantRelease.V1_8_0):
            for block in self.mod_blocks:
                block.shape_edited = reader.read_bool32()
            for block in self.gen_blocks:
                block.filter_effect.slope = reader.read_u32()
            unknowns.block_128 = reader.read_bytes(BLOCK_128_SIZE)
        if reader.is_release_at_least(PhasePlantRelease.V1_8_5):
            for block in self.mod_blocks:
                block.root_note = reader.read_u32()
                block.note_range = reader.read_u32()
                if (not block.mode.is_blank
                        and not NOTE_RANGE_MIN <= block.note_range <= NOTE_RANGE_MAX):
                    raise RangeError(
                        f"Note range {block.note_range} for {block.mode.label} is outside the "
                        f"valid range of {NOTE_RANGE_MIN} to {NOTE_RANGE_MAX} "
                        f"at position {reader.pos - 4}")

    def _read_unison_tables(self, voices, detune, spread, blend) -> Unison:
        reader = self.reader
        for block in self.gen_blocks:
            block.unison.mode = reader.read_enum(UnisonMode)
        mode = reader.read_enum(UnisonMode)
        for block in self.gen_blocks:
            block.unison.bias = reader.read_f32()
        bias = reader.read_f32()
        for block in self.gen_blocks:
            block.unison.enabled = reader.read_bool32()
        enabled = reader.read_bool32()
        return Unison(enabled, voices, mode, detune, spread, blend, bias)

    def _read_release_2_tables(self):
        reader = self.reader
        preset = self.preset
        unknowns = preset.unknowns

        logger.debug("Modulation curves at position %d", reader.pos)
        for modulation in preset.modulations:
            modulation.curve = reader.read_f32()
            modulation.enabled = reader.read_bool32()
        for _ in range(MODULATIONS_MAX - len(preset.modulations)):
            reader.expect_f32(0.0, 'modulation_curve')
            reader.expect_bool32(True, 'modulation_enabled')

        for macro in preset.macro_controls:
            macro.polarity = reader.read_enum(OutputRange)

        for block in self.mod_blocks:
            block.read_triggers(reader)
        for block in self.mod_blocks:
            block.lfo_table_frame = reader.read_f32()

        logger.debug("Block F at position %d", reader.pos)
        unknowns.modulator_block_f = []
        for block in self.mod_blocks:
            reader.expect_f32(1.0, 'block_f_unknown_1')
            block.loop_mode = reader.read_enum(LoopMode)
            reader.expect_u32(0, 'block_f_unknown_2')
            unknowns.modulator_block_f.append((reader.read_f32(), reader.read_f32()))

        logger.debug("Block G at position %d", reader.pos)
        unknowns.generator_curve_flag = []
        for block in self.gen_blocks:
            block.curve_edited = reader.read_bool32()
            unknowns.generator_curve_flag.append(reader.read_bool32())
            reader.expect_f32(1.0, 'block_g3_3')
            block.rate = Rate(frequency=reader.read_f32(),
                              numerator=reader.read_u32(),
                              denominator=reader.read_enum(NoteValue),
                              sync=reader.read_bool32())
            block.curve_loop_mode = reader.read_enum(LoopMode)
            block.curve_loop_start = reader.read_f32()
            block.curve_loop_length = reader.read_f32()
            block.settings_locked = reader.read_bool32()

        unknowns.lfo_table_time = []
        for block in self.mod_blocks:
            block.curve_time = reader.read_f32()
            # Reciprocal of the LFO table rate
            unknowns.lfo_table_time.append(reader.read_f32())
        for block in self.gen_blocks:
            block.curve_length = reader.read_f32()

        logger.debug("Block J at position %d", reader.pos)
        for block in self.mod_blocks:
            reader.expect_u32(0, 'block_j_unknown_1')
            block.voice_mode = reader.read_enum(VoiceMode)
            reader.expect_u32(0, 'block_j_unknown_3')
        for block in self.gen_blocks:
            block.output_enabled = reader.read_bool32()

    def _read_granular_tables(self):
        reader = self.reader
        logger.debug("Granular at position %d", reader.pos)
        for block in self.gen_blocks:
            block.read_granular(reader)
        for block in self.gen_blocks:
            reader.expect_f32(10.0, 'block_x_unknown1')
            reader.expect_u32(4, 'block_x_unknown2')
            reader.expect_u32(4, 'block_x_unknown3')
            block.granular_spawn_rate_mode = reader.read_enum(GranularSpawnRateMode)
            block.granular_chord.picking_pattern = reader.read_enum(ChordPickingPattern)

    def _read_string_pool(self):
        reader = self.reader
        if reader.is_release_at_least(PhasePlantRelease.V1_8_5):
            size = STRING_POOL_SIZE
        elif reader.is_release_at_least(PhasePlantRelease.V1_8_0):
            size = STRING_POOL_SIZE - 32
        else:
            size = STRING_POOL_SIZE - 64
        logger.debug("String pool of %d at position %d", size, reader.pos)
        pool = [reader.read_string() for _ in range(size)]

        for index, block in enumerate(self.gen_blocks):
            block.sample_name = pool[index]
            block.name = pool[index + 64] or None
            block.wavetable_name = pool[index + 104]
        for index, block in enumerate(self.mod_blocks):
            block.shape_name = pool[index + 32]
        for index, macro in enumerate(self.preset.macro_controls):
            macro.name = pool[index + 96] or ""
        if size > 136:
            for index, block in enumerate(self.mod_blocks):
                block.shape_path = pool[index + 136]
        if size > 168:
            for index, text in enumerate(pool[168:200]):
                if text is not None:
                    raise PhasePlantError(
                        f"Unexpected string pool text '{text}' at index {index + 168}")

        if reader.is_version_at_least_2_0():
            for block in self.gen_blocks:
                block.curve_name = reader.read_string()
                block.curve_path = reader.read_string()

    def _read_data_blocks(self):
        reader = self.reader
        logger.debug("Modulator data blocks at position %d", reader.pos)
        for block in self.mod_blocks:
            block.read_data_blocks(reader)
        logger.debug("Generator data blocks at position %d", reader.pos)
        for index, block in enumerate(self.gen_blocks):
            block.read_sample_block(reader, index)
            block.read_wavetable_block(reader, index)
        if reader.is_version_at_least_2_0():
            for block in self.mod_blocks:
                block.read_lfo_table_block(reader)
            for block in self.gen_blocks:
                block.read_curve_block(reader)


def _without_trailing_blanks(blocks):
    end = len(blocks)
    while end and blocks[end - 1].mode.is_blank:
        end -= 1
    return blocks[:end]


# ==============================================================================
# Writing
# ==============================================================================

class _PresetEncoder:
    """Writes the tables of a preset in file order."""

    def __init__(self, preset: Preset, writer: PresetWriter):
        self.preset = preset
        self.writer = writer
        if len(preset.generators) > GENERATORS_MAX:
            raise RangeError(f"{len(preset.generators)} generators exceed {GENERATORS_MAX}")
        if len(preset.modulators) > MODULATORS_MAX:
            raise RangeError(f"{len(preset.modulators)} modulators exceed {MODULATORS_MAX}")
        if len(preset.modulations) > MODULATIONS_MAX:
            raise RangeError(f"{len(preset.modulations)} modulations exceed {MODULATIONS_MAX}")
        if len(preset.lanes) > LANE_COUNT:
            raise RangeError(f"{len(preset.lanes)} lanes exceed {LANE_COUNT}")
        if len(preset.macro_controls) != MACRO_COUNT:
            raise RangeError(f"Expected {MACRO_COUNT} macro controls, "
                             f"have {len(preset.macro_controls)}")

        self.gen_blocks = [generator.to_block() for generator in preset.generators]
        self.gen_blocks += [GeneratorBlock.blank()
                            for _ in range(GENERATORS_MAX - len(self.gen_blocks))]
        self.mod_blocks = [container.to_block() for container in preset.modulators]
        self.mod_blocks += [ModulatorBlock.blank()
                            for _ in range(MODULATORS_MAX - len(self.mod_blocks))]
        self.lanes = list(preset.lanes)
        self.lanes += [Lane() for _ in range(LANE_COUNT - len(self.lanes))]

    def encode(self):
        writer = self.writer
        preset = self.preset
        version = FORMAT_VERSION
        writer.write_u32(version.major)
        writer.write_u32(version.patch)
        writer.write_u32(version.minor)
        writer.write_metadata(preset.metadata)
        writer.write_bool32(True)

        writer.write_u32(len(preset.modulations))
        for modulation in preset.modulations:
            writer.write_u32(modulation.source.id())
            writer.write_u32(modulation.target.id())
            writer.write_f32(modulation.amount)
        writer.write_zeros(12 * (MODULATIONS_MAX - len(preset.modulations)))
        writer.write_u32(1)

        for lane in self.lanes:
            writer.write_bool32(lane.enabled)
            writer.write_f32(lane.gain)
            writer.write_f32(lane.mix)
            writer.write_enum(lane.destination)
        for macro in preset.macro_controls:
            writer.write_f32(macro.value)

        for block in self.mod_blocks:
            block.write(writer)

        writer.write_f32(preset.mod_wheel_value)
        writer.write_f32(preset.master_pitch)
        writer.write_u32(preset.polyphony)
        writer.write_bool32(preset.retrigger_enabled)
        writer.write_bool32(preset.glide_enabled)
        writer.write_bool32(preset.glide_legato)
        writer.write_f32(preset.glide_time)

        for block in self.gen_blocks:
            block.write(writer)

        unison = preset.unison
        writer.write_u32(unison.voices)
        writer.write_f32(unison.detune)
        writer.write_f32(unison.spread)
        writer.write_f32(unison.blend)
        writer.write_f32(preset.master_gain)

        for index, lane in enumerate(self.lanes):
            writer.write_u8(lane.poly_count)
            writer.write_u8(0)
            writer.write_bool8(lane.mute)
            writer.write_u8(0)
            writer.write_bool32(lane.solo)
            if index < LANE_COUNT - 1:
                writer.write_u16(0)

        for block in self.mod_blocks:
            writer.write_bool32(block.minimized)
        for block in self.gen_blocks:
            writer.write_bool32(block.minimized)
        writer.write_u32(0)

        self._write_release_1_tables()
        self._write_release_2_tables()

        for block in self.mod_blocks:
            writer.write_f32(block.slew_limiter_attack)
            writer.write_f32(block.slew_limiter_decay)
        for block in self.mod_blocks:
            writer.write_bool32(block.slew_limiter_linked)

        for block in self.gen_blocks:
            block.write_granular(writer)
        for block in self.gen_blocks:
            writer.write_f32(10.0)
            writer.write_u32(4)
            writer.write_u32(4)
            writer.write_enum(block.granular_spawn_rate_mode)
            writer.write_enum(block.granular_chord.picking_pattern)

        for lane in self.lanes:
            writer.write_u32(len(lane.snapins))
            for index, snapin in enumerate(lane.snapins):
                write_snapin(writer, snapin, position=index + 1)

        for block in self.mod_blocks:
            writer.write_u32(block.audio_source.id)
            writer.write_string(block.audio_source.name)

        self._write_string_pool()

        for block in self.mod_blocks:
            block.write_data_blocks(writer)
        for block in self.gen_blocks:
            block.write_sample_block(writer)
            block.write_wavetable_block(writer)
        for block in self.mod_blocks:
            block.write_lfo_table_block(writer)
        for block in self.gen_blocks:
            block.write_curve_block(writer)
        logger.debug("Encoded preset of %d bytes", writer.pos)

    def _write_release_1_tables(self):
        writer = self.writer
        unknowns = self.preset.unknowns
        for index in range(GENERATORS_MAX):
            writer.write_bytes(unknowns.block_q(index))
        for block in self.gen_blocks:
            writer.write_bool32(block.base_pitch_locked)
            writer.write_bool32(block.offset_locked)
            writer.write_bool32(block.loop_locked)
        for block in self.mod_blocks:
            writer.write_bool32(block.shape_edited)
        for block in self.gen_blocks:
            writer.write_u32(block.filter_effect.slope)
        if len(unknowns.block_128) != BLOCK_128_SIZE:
            raise RangeError(f"Preserved block of {len(unknowns.block_128)} bytes, "
                             f"expected {BLOCK_128_SIZE}")
        writer.write_bytes(unknowns.block_128)
        for block in self.mod_blocks:
            writer.write_u32(block.root_note)
            writer.write_u32(block.note_range)

        unison = self.preset.unison
        for block in self.gen_blocks:
            writer.write_enum(block.unison.mode)
        writer.write_enum(unison.mode)
        for block in self.gen_blocks:
            writer.write_f32(block.unison.bias)
        writer.write_f32(unison.bias)
        for block in self.gen_blocks:
            writer.write_bool32(block.unison.enabled)
        writer.write_bool32(unison.enabled)
        for block in self.gen_blocks:
            writer.write_bool32(block.loop_enabled)

    def _write_release_2_tables(self):
        writer = self.writer
        preset = self.preset
        unknowns = preset.unknowns

        for modulation in preset.modulations:
            writer.write_f32(modulation.curve)
            writer.write_bool32(modulation.enabled)
        for _ in range(MODULATIONS_MAX - len(preset.modulations)):
            writer.write_f32(0.0)
            writer.write_bool32(True)
        for macro in preset.macro_controls:
            writer.write_enum(macro.polarity)

        for block in self.mod_blocks:
            block.write_triggers(writer)
        for block in self.mod_blocks:
            writer.write_f32(block.lfo_table_frame)
        for index, block in enumerate(self.mod_blocks):
            writer.write_f32(1.0)
            writer.write_enum(block.loop_mode)
            writer.write_u32(0)
            for value in unknowns.block_f(index):
                writer.write_f32(value)

        for index, block in enumerate(self.gen_blocks):
            writer.write_bool32(block.curve_edited)
            writer.write_bool32(unknowns.curve_flag(index))
            writer.write_f32(1.0)
            writer.write_f32(block.rate.frequency)
            writer.write_u32(block.rate.numerator)
            writer.write_enum(block.rate.denominator)
            writer.write_bool32(block.rate.sync)
            writer.write_enum(block.curve_loop_mode)
            writer.write_f32(block.curve_loop_start)
            writer.write_f32(block.curve_loop_length)
            writer.write_bool32(block.settings_locked)

        for index, block in enumerate(self.mod_blocks):
            writer.write_f32(block.curve_time)
            writer.write_f32(unknowns.lfo_time(index))
        for block in self.gen_blocks:
            writer.write_f32(block.curve_length)
        for block in self.mod_blocks:
            writer.write_u32(0)
            writer.write_enum(block.voice_mode)
            writer.write_u32(0)
        for block in self.gen_blocks:
            writer.write_bool32(block.output_enabled)

    def _write_string_pool(self):
        writer = self.writer
        pool: List[Optional[str]] = []
        pool += [block.sample_name for block in self.gen_blocks]
        pool += [block.shape_name for block in self.mod_blocks]
        # Default names are not stored
        pool += [None if block.name == block.mode.label else block.name
                 for block in self.gen_blocks]
        pool += [macro.name or None for macro in self.preset.macro_controls]
        pool += [block.wavetable_name for block in self.gen_blocks]
        pool += [block.shape_path for block in self.mod_blocks]
        pool += [None] * (STRING_POOL_SIZE - len(pool))
        for text in pool:
            writer.write_string(text)
        for block in self.gen_blocks:
            writer.write_string(block.curve_name)
            writer.write_string(block.curve_path)


def is_preset_data(data: bytes) -> bool:
    """Check the header of a buffer without decoding the rest."""
    if len(data) < 12:
        return False
    reader = PresetReader(data[:12])
    major = reader.read_u32()
    patch = reader.read_u32()
    minor = reader.read_u32()
    return is_likely_format_version(Version(major, minor, patch))

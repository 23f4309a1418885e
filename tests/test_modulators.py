"""
Modulator Tests

The fixed modulator record, the trigger table, modulator data blocks and the
typed modulator kinds.

Run with: pytest tests/test_modulators.py -v
"""

import os
import sys

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from phaseplant.errors import RangeError
from phaseplant.modulators import (AUDIO_SOURCE_LANE_2, AUDIO_SOURCE_MASTER,
                                   CONTROLLER_SLOT_NONE, MODULATOR_BLOCK_SIZE, MODULATORS_MAX,
                                   AudioFollowerModulator, AudioSourceId, BlankModulator,
                                   CurveModulator, EnvelopeModulator, GroupModulator,
                                   LfoModulator, LfoTableModulator, MeteringMode,
                                   MidiCcModulator, ModulatorBlock, ModulatorContainer,
                                   ModulatorMode, NoteModulator, NoteTriggerMode,
                                   PitchTrackerModulator, PitchWheelModulator,
                                   RandomModulator, RemapModulator, SampleAndHoldModulator,
                                   ScaleModulator, SlewLimiterModulator, VelocityModulator,
                                   VelocityTriggerMode, VoiceMode)
from phaseplant.stream import PresetReader, PresetWriter
from phaseplant.values import CurvePoint, Envelope, LoopMode, OutputRange, Rate
from phaseplant.version import FORMAT_VERSION


def encode(write) -> bytes:
    writer = PresetWriter()
    write(writer)
    return writer.getvalue()


def read_record(data: bytes, index: int = 0) -> ModulatorBlock:
    reader = PresetReader(data, FORMAT_VERSION)
    block = ModulatorBlock.read(reader, index)
    assert reader.remaining() == 0
    return block


class TestFixedRecord:
    """Mode, id and enabled followed by 100 bytes"""

    def test_size(self):
        """Every slot takes the same space"""
        data = encode(ModulatorBlock(mode=ModulatorMode.LFO, id=1).write)
        assert len(data) == 12 + MODULATOR_BLOCK_SIZE
        assert len(encode(ModulatorBlock.blank().write)) == len(data)

    def test_fields(self):
        """Single precision exact values come back unchanged"""
        block = ModulatorBlock(mode=ModulatorMode.SCALE, id=3, enabled=False,
                               input_a=0.25, input_b=-0.5, depth=0.75, multiplier=2.0,
                               output_range=OutputRange.BIPOLAR,
                               rate=Rate(frequency=4.0, numerator=3, sync=True),
                               phase_offset=0.5, smooth=0.125)
        loaded = read_record(encode(block.write))
        assert loaded.mode is ModulatorMode.SCALE
        assert loaded.id == 3
        assert not loaded.enabled
        assert (loaded.input_a, loaded.input_b) == (0.25, -0.5)
        assert loaded.depth == 0.75
        assert loaded.multiplier == 2.0
        assert loaded.output_range is OutputRange.BIPOLAR
        assert loaded.rate == Rate(frequency=4.0, numerator=3, sync=True)
        assert loaded.phase_offset == 0.5
        assert loaded.smooth == 0.125

    def test_stable_after_one_pass(self):
        """Decoding then encoding reproduces the bytes"""
        first = encode(LfoModulator().to_block().write)
        assert encode(read_record(first).write) == first

    @pytest.mark.parametrize("stored, loaded", [
        (NoteTriggerMode.NEVER, NoteTriggerMode.NEVER),
        (NoteTriggerMode.LEGATO, NoteTriggerMode.AUTO),
        (NoteTriggerMode.AUTO, NoteTriggerMode.AUTO),
    ])
    def test_retrigger_flag(self, stored, loaded):
        """The record only knows whether the modulator retriggers"""
        data = encode(ModulatorBlock(note_trigger_mode=stored).write)
        assert read_record(data).note_trigger_mode is loaded

    def test_one_shot_flag(self):
        """The record only knows whether the modulator loops"""
        one_shot = encode(ModulatorBlock(loop_mode=LoopMode.OFF).write)
        sustain = encode(ModulatorBlock(loop_mode=LoopMode.SUSTAIN).write)
        assert read_record(one_shot).loop_mode is LoopMode.OFF
        assert read_record(sustain).loop_mode is LoopMode.INFINITE

    def test_id_out_of_range(self):
        """Ids above the slot count are rejected"""
        data = encode(ModulatorBlock(mode=ModulatorMode.LFO, id=MODULATORS_MAX + 1).write)
        with pytest.raises(RangeError, match="position 4"):
            read_record(data)


class TestTriggerTable:
    """Phase Plant 2 trigger and follower settings"""

    def test_round_trip(self):
        """Every trigger field is stored"""
        block = ModulatorBlock(group_id=2, trigger_threshold=0.25,
                               note_trigger_mode=NoteTriggerMode.LEGATO,
                               metering_mode=MeteringMode.PEAK,
                               pitch_tracker_lowest=24, pitch_tracker_highest=96,
                               pitch_tracker_sensitivity=0.5, pitch_tracker_root=60,
                               controller_slot=7,
                               velocity_trigger_mode=VelocityTriggerMode.BOTH)
        data = encode(block.write_triggers)
        assert len(data) == 48
        loaded = ModulatorBlock()
        loaded.read_triggers(PresetReader(data, FORMAT_VERSION))
        assert loaded.group_id == 2
        assert loaded.trigger_threshold == 0.25
        assert loaded.note_trigger_mode is NoteTriggerMode.LEGATO
        assert loaded.metering_mode.label == 'Peak'
        assert (loaded.pitch_tracker_lowest, loaded.pitch_tracker_highest) == (24, 96)
        assert loaded.pitch_tracker_root == 60
        assert loaded.controller_slot == 7
        assert loaded.velocity_trigger_mode is VelocityTriggerMode.BOTH

    def test_unassigned_controller(self):
        """No controller is stored as all ones"""
        data = encode(ModulatorBlock(controller_slot=None).write_triggers)
        assert data[40:44] == CONTROLLER_SLOT_NONE.to_bytes(4, 'little')
        loaded = ModulatorBlock()
        loaded.read_triggers(PresetReader(data, FORMAT_VERSION))
        assert loaded.controller_slot is None


class TestDataBlocks:
    """Two data blocks per modulator slot"""

    SHAPE = [CurvePoint.sharp(0.0, 0.0), CurvePoint.smooth(0.5, 1.0, 0.25, 0.0),
             CurvePoint.sharp(1.0, 0.0)]

    def test_unused(self):
        """A modulator without data writes two unused blocks"""
        assert encode(ModulatorBlock().write_data_blocks) == b'\x01\x00\x00\x00\x00' * 2

    @pytest.mark.parametrize("mode", [ModulatorMode.LFO, ModulatorMode.CURVE,
                                      ModulatorMode.REMAP])
    def test_shape(self, mode):
        """Curve, LFO and Remap keep their shape in the first block"""
        data = encode(ModulatorBlock(mode=mode, shape=self.SHAPE).write_data_blocks)
        reader = PresetReader(data, FORMAT_VERSION)
        loaded = ModulatorBlock(mode=mode)
        loaded.read_data_blocks(reader)
        assert reader.remaining() == 0
        assert loaded.shape == self.SHAPE
        assert loaded.data_blocks == []

    def test_unknown_blocks_are_kept(self):
        """Blocks of other modes are preserved as bytes"""
        source = ModulatorBlock(mode=ModulatorMode.ENVELOPE, data_blocks=[(4, b'\x01\x02\x03')])
        loaded = ModulatorBlock(mode=ModulatorMode.ENVELOPE)
        loaded.read_data_blocks(PresetReader(encode(source.write_data_blocks), FORMAT_VERSION))
        assert loaded.data_blocks == [(4, b'\x01\x02\x03')]

    def test_blank_blocks_are_skipped(self):
        """Left over data of empty slots is dropped"""
        source = ModulatorBlock(mode=ModulatorMode.LFO, shape=self.SHAPE)
        reader = PresetReader(encode(source.write_data_blocks), FORMAT_VERSION)
        loaded = ModulatorBlock()
        loaded.read_data_blocks(reader)
        assert reader.remaining() == 0
        assert loaded.shape == []
        assert loaded.data_blocks == []

    def test_too_many_blocks(self):
        """A shape and two preserved blocks do not fit"""
        block = ModulatorBlock(mode=ModulatorMode.LFO, shape=self.SHAPE,
                               data_blocks=[(2, b'a'), (3, b'b')])
        with pytest.raises(RangeError, match="3 data blocks"):
            encode(block.write_data_blocks)

    def test_lfo_table(self):
        """LFO table wavetables with contents"""
        source = ModulatorBlock(mode=ModulatorMode.LFO_TABLE,
                                lfo_table_wavetable_path="Tables/Steps.wt",
                                lfo_table_wavetable_contents=b'\x00\x01\x02\x03')
        data = encode(source.write_lfo_table_block)
        assert PresetReader(data, FORMAT_VERSION).read_block_header().mode_id == 1
        reader = PresetReader(data, FORMAT_VERSION)
        loaded = ModulatorBlock(mode=ModulatorMode.LFO_TABLE)
        loaded.read_lfo_table_block(reader)
        assert reader.remaining() == 0
        assert loaded.lfo_table_wavetable_path == "Tables/Steps.wt"
        assert loaded.lfo_table_wavetable_contents == b'\x00\x01\x02\x03'

    def test_lfo_table_path_only(self):
        """Factory tables are stored by path alone"""
        source = ModulatorBlock(lfo_table_wavetable_path="factory/Saw.wt")
        loaded = ModulatorBlock()
        loaded.read_lfo_table_block(PresetReader(encode(source.write_lfo_table_block),
                                                 FORMAT_VERSION))
        assert loaded.lfo_table_wavetable_path == "factory/Saw.wt"
        assert loaded.lfo_table_wavetable_contents == b''


class TestAudioSource:
    """Four character source tags"""

    def test_master_bytes(self):
        """The "main" tag is stored reversed"""
        assert AUDIO_SOURCE_MASTER.id.to_bytes(4, 'little') == b'niam'
        assert AUDIO_SOURCE_MASTER.tag == 'main'
        assert str(AUDIO_SOURCE_LANE_2) == "Lane 2"

    def test_default(self):
        """Followers listen to the master by default"""
        assert AudioSourceId() == AUDIO_SOURCE_MASTER
        assert AudioFollowerModulator().audio_source == AUDIO_SOURCE_MASTER


KINDS = [
    BlankModulator(),
    GroupModulator(name="Drums"),
    EnvelopeModulator(envelope=Envelope(attack=0.5, sustain=0.25), depth=0.5),
    LfoModulator(rate=Rate(frequency=3.0), loop_mode=LoopMode.OFF, phase_offset=0.25),
    CurveModulator(rate=Rate(frequency=4.0)),
    LfoTableModulator(frame=0.5, wavetable_path="Table.wt", smooth=0.25),
    RandomModulator(jitter=0.5, chaos=0.25, voice_mode=VoiceMode.INDEPENDENT),
    AudioFollowerModulator(attack_time=0.02, release_time=0.2, audio_source=AUDIO_SOURCE_LANE_2,
                           metering_mode=MeteringMode.PEAK),
    PitchTrackerModulator(lowest_note=40, highest_note=80, sensitivity=0.5),
    MidiCcModulator(controller_slot=74),
    VelocityModulator(trigger_mode=VelocityTriggerMode.RELEASE),
    NoteModulator(root_note=60, note_range=24),
    PitchWheelModulator(depth=0.5),
    SampleAndHoldModulator(input_a=0.25, input_b=0.75),
    ScaleModulator(multiplier=2.0),
    RemapModulator(bipolar=True),
    SlewLimiterModulator(attack=0.5, decay=0.25, linked=False),
]


class TestModulatorKinds:
    """Typed modulators and their block mapping"""

    def test_every_mode_has_a_kind(self):
        """Blocks of every mode convert to a modulator of that mode"""
        for mode in ModulatorMode:
            assert ModulatorContainer.from_block(ModulatorBlock(mode=mode)).mode is mode

    def test_shared_fields_are_merged(self):
        """Kinds combine the shared range, trigger and shape fields with their own"""
        fields = LfoModulator.BLOCK_FIELDS
        for name in ('output_range', 'depth', 'note_trigger_mode', 'trigger_threshold',
                     'shape', 'shape_path', 'loop_mode', 'rate', 'phase_offset'):
            assert name in fields
        assert 'rate' in CurveModulator.BLOCK_FIELDS
        assert 'shape' in CurveModulator.BLOCK_FIELDS

    @pytest.mark.parametrize("modulator", KINDS, ids=lambda modulator: modulator.mode.name)
    def test_block_fields_exist(self, modulator):
        """Every mapped attribute exists on the kind and on the block"""
        block = ModulatorBlock()
        for attribute, block_attribute in type(modulator).BLOCK_FIELDS.items():
            assert hasattr(modulator, attribute)
            assert hasattr(block, block_attribute)

    @pytest.mark.parametrize("modulator", KINDS, ids=lambda modulator: modulator.mode.name)
    def test_block_round_trip(self, modulator):
        """A container converts to a block and back unchanged"""
        container = ModulatorContainer(modulator, id=4, group_id=1, minimized=True)
        assert ModulatorContainer.from_block(container.to_block()) == container

    def test_curve_length_is_reciprocal_rate(self):
        """Curve modulators store their length"""
        block = CurveModulator(rate=Rate(frequency=4.0)).to_block()
        assert block.curve_time == 0.25
        block.curve_time = 2.0
        assert CurveModulator.from_block(block).rate.frequency == 0.5

    def test_follower_times_use_envelope(self):
        """Audio follower attack and release live in the envelope"""
        block = AudioFollowerModulator(attack_time=0.02, release_time=0.3).to_block()
        assert block.envelope.attack == 0.02
        assert block.envelope.release == 0.3

    def test_remap_polarity(self):
        """Remap maps its bipolar flag onto the output range"""
        assert RemapModulator(bipolar=True).to_block().output_range is OutputRange.BIPOLAR
        assert not RemapModulator.from_block(ModulatorBlock(mode=ModulatorMode.REMAP)).bipolar

    def test_group_name(self):
        """Group names share the shape name string"""
        assert GroupModulator(name="Bass").to_block().shape_name == "Bass"

    def test_container_defaults(self):
        """An empty container holds a blank modulator outside any group"""
        container = ModulatorContainer()
        assert isinstance(container.modulator, BlankModulator)
        assert container.mode.is_blank
        assert not container.is_grouped
        assert ModulatorContainer(LfoModulator(), group_id=0).is_grouped

    def test_lfo_defaults(self):
        """New LFOs use the Pyramid shape"""
        lfo = LfoModulator()
        assert lfo.shape_name == "Pyramid"
        assert [point.y for point in lfo.shape] == [-1.0, 1.0]
        assert lfo.to_block().envelope.decay == 0.1

    def test_labels(self):
        """Names shown for each kind"""
        assert LfoModulator().name == "LFO"
        assert SampleAndHoldModulator().name == "Sample & Hold"
        assert MidiCcModulator().name == "MIDI CC"
        assert ModulatorMode.LFO_TABLE.label == "LFO Table"
        assert ModulatorMode.MPE_TIMBRE.label == "MPE Timbre"
        assert PitchWheelModulator().output_range is OutputRange.BIPOLAR


if __name__ == '__main__':
    exit(pytest.main([__file__, '-v']))

"""
Effect Test Suite

Decodes hand assembled effect payloads, checks version gating and the
snapin framing around effects, and round trips every effect kind.

Run with: pytest tests/test_effects.py -v
"""

import os
import struct
import sys

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from phaseplant.effects import (Bitcrush, ChannelMixer, Chorus, CompressorMode,
                                Convolver, Delay, EffectMode, Group, PatternResolution,
                                SidechainMode, TranceGate, effect_class, read_effect)
from phaseplant.errors import (CrossFieldError, PhasePlantError, RangeError,
                               SentinelMismatchError, UnknownEnumError, VersionTooOldError)
from phaseplant.snapin import Snapin, read_snapin, write_snapin
from phaseplant.stream import PresetReader, PresetWriter
from phaseplant.version import FORMAT_VERSION, Version


# ==============================================================================
# Helpers
# ==============================================================================

def encode(snapin: Snapin) -> bytes:
    writer = PresetWriter()
    write_snapin(writer, snapin)
    return writer.getvalue()


def round_trip(snapin: Snapin) -> Snapin:
    reader = PresetReader(encode(snapin), FORMAT_VERSION)
    loaded = read_snapin(reader)
    assert reader.remaining() == 0, "snapin must consume exactly its own bytes"
    return loaded


def effect_body(effect_version: int, payload: bytes, slot_format: int = 6,
                preset_name: str = None, path_flag: int = 0) -> bytes:
    """Framing in front of a regular effect's parameters."""
    writer = PresetWriter()
    writer.write_u32(slot_format)
    writer.write_u32(effect_version)
    writer.write_bool32(True)
    writer.write_string(preset_name)
    writer.write_path([])
    writer.write_u8(path_flag)
    writer.write_bool32(False)
    writer.write_bytes(payload)
    return writer.getvalue()


def raw_snapin(mode: EffectMode, body: bytes, host=Version(1, 8, 13),
               name: str = None, position: int = 1) -> bytes:
    writer = PresetWriter()
    writer.write_bytes(mode.value.to_bytes(4, 'big'))
    for part in (host.patch, host.minor, host.major, host.extra):
        writer.write_u8(part)
    writer.write_string(name)
    writer.write_u16(position)
    writer.write_u32(len(body))
    writer.write_bytes(body)
    return writer.getvalue()


def default_bitcrush_1038() -> bytes:
    """Bitcrush as Phase Plant 1.8.13 saves a fresh instance."""
    return (struct.pack('<I', 1)
            + struct.pack('<7f', 6000.0, 16.0, 1.0, 0.0, 0.0, 1.0, 1.0)
            + struct.pack('<III', 0, 0, 0))


def sidechain(mode_id: int, label: str) -> bytes:
    raw = label.encode('ascii')
    return struct.pack('<II', mode_id, len(raw)) + raw


# ==============================================================================
# Decoding known payloads
# ==============================================================================

class TestBitcrush:
    """Bitcrush payloads"""

    def test_default_record(self):
        """A fresh Bitcrush from Phase Plant 1.8.13"""
        reader = PresetReader(default_bitcrush_1038())
        loaded = read_effect(EffectMode.BITCRUSH, reader, 1038)
        effect = loaded.effect
        assert isinstance(effect, Bitcrush)
        assert effect.frequency == pytest.approx(6000.0, abs=3.0)
        assert effect.quantize == 1.0
        assert effect.bits == 16.0
        assert effect.dither == 0.0
        assert effect.adc_quality == 1.0
        assert effect.dac_quality == 0.0
        assert effect.mix == 1.0
        assert loaded.enabled
        assert not loaded.minimized
        assert reader.remaining() == 0

    def test_default_record_in_snapin(self):
        """The same payload framed as a lane snapin"""
        data = raw_snapin(EffectMode.BITCRUSH, effect_body(1038, default_bitcrush_1038()),
                          name="Bitcrush")
        snapin = read_snapin(PresetReader(data, FORMAT_VERSION))
        assert snapin.name == "Bitcrush"
        assert snapin.position == 1
        assert snapin.effect_version == 1038
        assert snapin.host_version == Version(1, 8, 13)
        assert snapin.effect_as(Bitcrush).bits == 16.0

    def test_round_trip_at_write_version(self):
        """Decode at 1038, write at 1049, decode again"""
        data = raw_snapin(EffectMode.BITCRUSH, effect_body(1038, default_bitcrush_1038()))
        original = read_snapin(PresetReader(data, FORMAT_VERSION))
        assert original.effect.write_version() == 1049

        reloaded = round_trip(original)
        assert reloaded.effect_version == 1049
        assert reloaded.effect == original.effect
        assert reloaded.enabled == original.enabled
        assert reloaded.minimized == original.minimized

    def test_version_too_old(self):
        """Layouts before 1038 are rejected"""
        with pytest.raises(VersionTooOldError, match="1037"):
            Bitcrush.read(PresetReader(default_bitcrush_1038()), 1037)

    def test_padding_must_be_zero(self):
        """A nonzero padding word names the field"""
        data = bytearray(default_bitcrush_1038())
        data[-4] = 1
        with pytest.raises(SentinelMismatchError, match="bitcrush_unknown2"):
            Bitcrush.read(PresetReader(bytes(data)), 1038)

    def test_negative_bits(self):
        """Bit depth can not be negative"""
        data = bytearray(default_bitcrush_1038())
        data[8:12] = struct.pack('<f', -1.0)
        with pytest.raises(RangeError):
            Bitcrush.read(PresetReader(bytes(data)), 1038)


class TestCompressor:
    """Compressor payloads"""

    def payload(self, sidechain_bytes: bytes) -> bytes:
        return (struct.pack('<I', 1)
                + struct.pack('<ff', 0.011, 0.022)
                + struct.pack('<I', 0)
                + struct.pack('<fff', 2.0, 0.5, 0.0)
                + struct.pack('<IIII', 0, 0, 0, 0)
                + sidechain_bytes)

    def test_rms_attack_release(self):
        """Attack 11 ms, release 22 ms, RMS mode"""
        reader = PresetReader(self.payload(sidechain(0xFFFFFFFF, "Off")))
        effect = read_effect(EffectMode.COMPRESSOR, reader, 1049).effect
        assert effect.compressor_mode is CompressorMode.ROOT_MEAN_SQUARED
        assert effect.compressor_mode.label == 'RMS'
        assert effect.attack * 1000.0 == pytest.approx(11.0)
        assert effect.release * 1000.0 == pytest.approx(22.0)
        assert effect.sidechain_mode is SidechainMode.OFF
        assert reader.remaining() == 0

    def test_sideband(self):
        """The sideband id and its name agree"""
        reader = PresetReader(self.payload(sidechain(0x73646230, "Sideband")))
        effect = read_effect(EffectMode.COMPRESSOR, reader, 1049).effect
        assert effect.sidechain_mode is SidechainMode.SIDEBAND

    def test_sidechain_disagreement(self):
        """Id and name must describe the same sidechain"""
        reader = PresetReader(self.payload(sidechain(0x73646230, "Off")))
        with pytest.raises(CrossFieldError):
            read_effect(EffectMode.COMPRESSOR, reader, 1049)

    def test_unknown_sidechain_name(self):
        """Unknown sidechain names are rejected"""
        reader = PresetReader(self.payload(sidechain(0xFFFFFFFF, "Aux")))
        with pytest.raises(UnknownEnumError):
            read_effect(EffectMode.COMPRESSOR, reader, 1049)


class TestChorus:
    """Chorus payloads"""

    def test_three_taps_disabled(self):
        """taps=3 rate=2 Hz, disabled"""
        payload = (struct.pack('<I', 0)
                   + struct.pack('<5f', 0.004, 2.0, 0.004, 1.0, 1.0)
                   + struct.pack('<IIII', 1, 0, 0, 0))
        data = raw_snapin(EffectMode.CHORUS, effect_body(1037, payload))
        snapin = read_snapin(PresetReader(data, FORMAT_VERSION))
        chorus = snapin.effect_as(Chorus)
        assert chorus.taps == 3
        assert chorus.rate == 2.0
        assert not snapin.enabled

    def test_bad_tap_count(self):
        """Only two or three taps exist"""
        payload = (struct.pack('<I', 1)
                   + struct.pack('<5f', 0.004, 2.0, 0.004, 1.0, 1.0)
                   + struct.pack('<IIII', 5, 0, 0, 0))
        with pytest.raises(UnknownEnumError):
            Chorus.read(PresetReader(payload), 1037)

    def test_write_bad_tap_count(self):
        """Writing four taps fails"""
        with pytest.raises(RangeError):
            encode(Snapin(Chorus(taps=4)))


class TestDelay:
    """Delay payloads"""

    def test_tone(self):
        """tone = 25% from Phase Plant 2.0.16"""
        payload = (struct.pack('<I', 1)
                   + struct.pack('<f', 0.2)
                   + struct.pack('<II', 3, 4)
                   + struct.pack('<I', 0)
                   + struct.pack('<ff', 0.5, 0.0)
                   + struct.pack('<I', 0)
                   + struct.pack('<ff', 0.0, 0.5)
                   + struct.pack('<III', 0, 0, 0)
                   + struct.pack('<I', 0)
                   + struct.pack('<f', 0.25))
        reader = PresetReader(payload)
        loaded = read_effect(EffectMode.DELAY, reader, 1049)
        delay = loaded.effect
        assert delay.tone == 0.25
        assert not delay.sync
        assert not delay.bounce
        assert loaded.group_id is None
        assert reader.remaining() == 0

    def test_tone_absent_before_1049(self):
        """Older layouts end at the group id"""
        effect = Delay(tone=0.5)
        writer = PresetWriter()
        effect.write(writer, Snapin(effect))
        data = writer.getvalue()[:-4]
        loaded = Delay.read(PresetReader(data), 1046)
        assert loaded.effect.tone == 0.0

    def test_group_membership(self):
        """Group id survives a round trip"""
        loaded = round_trip(Snapin(Delay(), group_id=7))
        assert loaded.group_id == 7


class TestTranceGate:
    """Trance Gate payloads"""

    def test_pattern(self):
        """pattern 1, step_count[0] = 11, sustain 80%, release 25 ms"""
        gate = TranceGate(pattern_number=1, sustain=0.8, release=0.025)
        gate.step_count[0] = 11
        loaded = round_trip(Snapin(gate)).effect_as(TranceGate)
        assert loaded.pattern_number == 1
        assert loaded.step_count[0] == 11
        assert loaded.sustain == pytest.approx(0.8)
        assert loaded.release * 1000.0 == pytest.approx(25.0)
        assert len(loaded.pattern(0)) == 11

    def test_defaults(self):
        """Eight factory patterns of 64 stored steps"""
        gate = TranceGate()
        assert gate.step_count == [16, 16, 32, 16, 16, 16, 16, 64]
        assert all(len(row) == 64 for row in gate.step_enabled)
        assert gate.resolution is PatternResolution.THIRTY_SECOND
        assert gate.resolution.label == '1/32'

    def test_pattern_count_enforced(self):
        """Writing fewer than eight patterns fails"""
        gate = TranceGate(step_count=[16])
        with pytest.raises(RangeError):
            encode(Snapin(gate))

    def test_short_step_row(self):
        """A pattern row with fewer than 64 steps fails"""
        gate = TranceGate()
        gate.step_enabled[2] = [True] * 16
        with pytest.raises(RangeError, match="pattern 3 has 16 enabled steps"):
            encode(Snapin(gate))

    def test_missing_tied_rows(self):
        """Every pattern needs a row of tied steps"""
        gate = TranceGate()
        gate.step_tied = gate.step_tied[:7]
        with pytest.raises(RangeError, match="8 rows of tied steps"):
            encode(Snapin(gate))

    def test_step_count_above_maximum(self):
        """Patterns play at most 64 steps"""
        gate = TranceGate()
        gate.step_count[7] = 65
        with pytest.raises(RangeError, match="pattern 8 has a step count of 65"):
            encode(Snapin(gate))

    def test_stored_step_count_above_maximum(self):
        """A stored step count above 64 is rejected on read"""
        gate = TranceGate()
        writer = PresetWriter()
        gate.write(writer, Snapin(gate))
        # Enabled flag, five floats, resolution and pattern number come first
        data = bytearray(writer.getvalue())
        data[32:36] = struct.pack('<I', 65)
        with pytest.raises(RangeError, match="step count 65"):
            TranceGate.read(PresetReader(bytes(data)), TranceGate.WRITE_VERSION)


class TestRanges:
    """Range checked fields"""

    def test_channel_mixer_level(self):
        """Levels outside -1..1 are rejected"""
        payload = struct.pack('<4f', 1.5, 0.0, 0.0, 1.0) + bytes(20)
        with pytest.raises(RangeError, match="left_to_left"):
            ChannelMixer.read(PresetReader(payload), 1002)

    def test_channel_mixer_newer_version(self):
        """Channel Mixer layouts above 1002 are unknown"""
        with pytest.raises(VersionTooOldError):
            ChannelMixer.read(PresetReader(bytes(36)), 1003)

    def test_convolver_ir_path(self):
        """The impulse response path sits in its own data block"""
        convolver = Convolver(ir_name="Hall", ir_path=["Halls/Big.flac"])
        loaded = round_trip(Snapin(convolver)).effect_as(Convolver)
        assert loaded.ir_name == "Hall"
        assert loaded.ir_path == ["Halls/Big.flac"]
        assert loaded.ir_block_mode == 2


# ==============================================================================
# Snapin framing
# ==============================================================================

class TestSnapinFraming:
    """Framing around the effect payload"""

    def test_effect_id_is_big_endian(self):
        """The four character id is stored reversed"""
        data = encode(Snapin(Bitcrush()))
        assert data[:4] == b'cbsk'

    def test_unknown_effect_id(self):
        """Unknown ids report the tag"""
        data = b'zzzz' + raw_snapin(EffectMode.BITCRUSH, b'')[4:]
        with pytest.raises(UnknownEnumError, match="zzzz"):
            read_snapin(PresetReader(data, FORMAT_VERSION))

    def test_position_zero(self):
        """Positions start at one"""
        data = raw_snapin(EffectMode.BITCRUSH, effect_body(1038, default_bitcrush_1038()),
                          position=0)
        with pytest.raises(RangeError):
            read_snapin(PresetReader(data, FORMAT_VERSION))

    def test_length_mismatch(self):
        """Bytes left inside the declared length are an error"""
        body = effect_body(1038, default_bitcrush_1038()) + b'\0'
        data = raw_snapin(EffectMode.BITCRUSH, body)
        with pytest.raises(PhasePlantError, match="1 bytes remaining"):
            read_snapin(PresetReader(data, FORMAT_VERSION))

    def test_slot_format_one_rejected(self):
        """Slot format 1 exists only for host effects"""
        body = effect_body(1038, default_bitcrush_1038(), slot_format=1)
        data = raw_snapin(EffectMode.BITCRUSH, body)
        with pytest.raises(PhasePlantError, match="Slot format 1"):
            read_snapin(PresetReader(data, FORMAT_VERSION))

    def test_preset_identity(self):
        """Effect preset name, path and edited flag survive"""
        snapin = Snapin(Bitcrush(bits=8.0), name="Crunch", position=3,
                        preset_name="Lo-Fi", preset_path=["factory", "Lo-Fi.ksbc"],
                        preset_edited=True, minimized=True, enabled=False)
        loaded = round_trip(snapin)
        assert loaded.name == "Crunch"
        assert loaded.position == 3
        assert loaded.preset_name == "Lo-Fi"
        assert loaded.preset_path == ["factory", "Lo-Fi.ksbc"]
        assert loaded.preset_edited
        assert loaded.minimized
        assert not loaded.enabled

    def test_path_flag_kept(self):
        """The byte after the preset path is read and written back"""
        body = effect_body(1038, default_bitcrush_1038(), path_flag=1)
        snapin = read_snapin(PresetReader(raw_snapin(EffectMode.BITCRUSH, body), FORMAT_VERSION))
        assert snapin.path_flag == 1
        assert round_trip(snapin).path_flag == 1

    def test_path_flag_before_1_7(self):
        """Releases before 1.7.0 store no byte after the path"""
        writer = PresetWriter()
        writer.write_u32(6)
        writer.write_u32(1038)
        writer.write_bool32(True)
        writer.write_string(None)
        writer.write_path([])
        writer.write_bool32(False)
        writer.write_bytes(default_bitcrush_1038())
        data = raw_snapin(EffectMode.BITCRUSH, writer.getvalue(), host=Version(1, 6, 9))
        snapin = read_snapin(PresetReader(data, FORMAT_VERSION))
        assert snapin.path_flag == 0
        assert snapin.effect_as(Bitcrush).bits == 16.0

    def test_default_name(self):
        """Snapins are named after their effect"""
        assert Snapin(Bitcrush()).name == "Bitcrush"
        assert Snapin(Group()).name == "Group"
        assert Snapin(Group(name="Drums")).effect.name == "Drums"

    def test_effect_as_wrong_kind(self):
        """Asking for the wrong kind is a type error"""
        with pytest.raises(TypeError):
            Snapin(Bitcrush()).effect_as(Chorus)


# ==============================================================================
# Every kind
# ==============================================================================

class TestEveryKind:
    """Properties that hold for all effect kinds"""

    def test_ids_are_distinct(self):
        """Every mode has its own id and decodes back to itself"""
        values = [mode.value for mode in EffectMode]
        assert len(values) == len(set(values))
        for mode in EffectMode:
            assert EffectMode.from_id(mode.value) is mode
            assert len(mode.tag) == 4

    def test_tags_are_little_endian(self):
        """Ids are the ASCII tag read as a little-endian word"""
        assert EffectMode.BITCRUSH.value == int.from_bytes(b'ksbc', 'little')
        assert EffectMode.SNAP_HEAP.tag == 'kmic'

    def test_host_kinds(self):
        """Only the four host effects use host framing"""
        hosts = {mode for mode in EffectMode if mode.is_host}
        assert hosts == {EffectMode.CARVE_EQ, EffectMode.MULTIPASS,
                         EffectMode.SNAP_HEAP, EffectMode.SLICE_EQ}

    @pytest.mark.parametrize("mode", list(EffectMode), ids=lambda mode: mode.tag)
    def test_round_trip(self, mode):
        """Decode, encode and decode again without change"""
        effect = effect_class(mode)()
        assert effect.mode is mode
        first = round_trip(effect.default_snapin(position=2))
        second = round_trip(first)
        assert second == first
        assert encode(second) == encode(first)

    @pytest.mark.parametrize("mode", list(EffectMode), ids=lambda mode: mode.tag)
    def test_write_version_supported(self, mode):
        """Every kind can read the layout it writes"""
        cls = effect_class(mode)
        assert cls.WRITE_VERSION >= cls.MIN_VERSION
        if cls.MAX_VERSION is not None:
            assert cls.WRITE_VERSION <= cls.MAX_VERSION


if __name__ == '__main__':
    exit(pytest.main([__file__, '-v']))

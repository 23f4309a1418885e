"""
Host Effect Tests

Slice EQ, Carve EQ, Multipass and Snap Heap: their own framing, the 32 slot
filter table and the opaque payload that holds nested snapins.

Run with: pytest tests/test_host_effects.py -v
"""

import os
import sys

import numpy as np
import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from phaseplant.effects import (Bitcrush, CarveEq, ChannelMode, Chorus, Multipass,
                                OversampleMode, SliceEq, SliceEqFilter, SliceEqFilterMode,
                                SnapHeap)
from phaseplant.errors import RangeError, VersionTooOldError
from phaseplant.snapin import Snapin, read_snapin, write_snapin
from phaseplant.stream import PresetReader, PresetWriter
from phaseplant.values import Decibels, Metadata, StereoMode
from phaseplant.version import FORMAT_VERSION, Version


def round_trip(snapin: Snapin) -> Snapin:
    writer = PresetWriter()
    write_snapin(writer, snapin)
    reader = PresetReader(writer.getvalue(), FORMAT_VERSION)
    loaded = read_snapin(reader)
    assert reader.remaining() == 0, "host snapin must consume exactly its own bytes"
    return loaded


def nested_payload(effect_cls, snapins) -> bytes:
    """Payload holding a count and the encoded snapins, zero padded."""
    writer = PresetWriter()
    writer.write_u32(len(snapins))
    for snapin in snapins:
        write_snapin(writer, snapin)
    size = effect_cls.payload_size(effect_cls.WRITE_VERSION)
    assert writer.pos <= size
    writer.write_zeros(size - writer.pos)
    return writer.getvalue()


def read_nested(data: bytes):
    reader = PresetReader(data, FORMAT_VERSION)
    return [read_snapin(reader) for _ in range(reader.read_u32())]


# ==============================================================================
# Slice EQ
# ==============================================================================

SCENARIO_MODES = [
    SliceEqFilterMode.LOW_CUT,
    SliceEqFilterMode.LOW_SHELF,
    SliceEqFilterMode.PEAK,
    SliceEqFilterMode.NOTCH,
    SliceEqFilterMode.HIGH_SHELF,
    SliceEqFilterMode.HIGH_CUT,
]


class TestSliceEq:
    """Slice EQ filter table"""

    def test_filter_order(self):
        """Filters come back in slot order"""
        filters = [SliceEqFilter(id=index + 1, filter_mode=mode, enabled=True,
                                 cutoff_frequency=100.0 * (index + 1))
                   for index, mode in enumerate(SCENARIO_MODES)]
        loaded = round_trip(Snapin(SliceEq(filters=filters))).effect_as(SliceEq)
        assert [f.filter_mode for f in loaded.filters] == SCENARIO_MODES
        assert loaded.oversample_mode is OversampleMode.AUTO
        assert loaded.stereo_mode is StereoMode.MID_SIDE
        assert [f.cutoff_frequency for f in loaded.filters] == [100.0, 200.0, 300.0,
                                                                400.0, 500.0, 600.0]

    def test_empty_slots_are_kept(self):
        """Unused slots are remembered by index"""
        filters = [SliceEqFilter(id=index + 1, filter_mode=mode, enabled=True)
                   for index, mode in enumerate(SCENARIO_MODES)]
        loaded = round_trip(Snapin(SliceEq(filters=filters))).effect_as(SliceEq)
        assert len(loaded.filters) == 6
        assert sorted(loaded.empty_slots) == list(range(6, 32))
        assert loaded.empty_slots[6].id == SliceEqFilter.ID_WHEN_DELETED

    def test_gap_between_filters(self):
        """A deleted slot between two filters stays in place"""
        effect = SliceEq(filters=[SliceEqFilter(id=1), SliceEqFilter(id=3)],
                         empty_slots={1: SliceEqFilter.deleted()})
        loaded = round_trip(Snapin(effect)).effect_as(SliceEq)
        assert [f.id for f in loaded.filters] == [1, 3]
        assert 1 in loaded.empty_slots
        assert 2 not in loaded.empty_slots

    def test_filter_added_after_reading(self):
        """A filter appended to a loaded EQ takes the next empty slot"""
        effect = SliceEq(filters=[SliceEqFilter(id=1), SliceEqFilter(id=2)])
        loaded = round_trip(Snapin(effect))
        loaded.effect_as(SliceEq).filters.append(SliceEqFilter(id=3))
        reloaded = round_trip(loaded).effect_as(SliceEq)
        assert [f.id for f in reloaded.filters] == [1, 2, 3]
        assert sorted(reloaded.empty_slots) == list(range(3, 32))

    def test_filter_added_keeps_gap(self):
        """An appended filter goes after the last one, not into a gap"""
        effect = SliceEq(filters=[SliceEqFilter(id=1), SliceEqFilter(id=3)],
                         empty_slots={1: SliceEqFilter.deleted()})
        loaded = round_trip(Snapin(effect))
        loaded.effect_as(SliceEq).filters.append(SliceEqFilter(id=4))
        reloaded = round_trip(loaded).effect_as(SliceEq)
        assert [f.id for f in reloaded.filters] == [1, 3, 4]
        assert 1 in reloaded.empty_slots
        assert 3 not in reloaded.empty_slots

    def test_channel_modes_around_slot_eight(self):
        """Channel modes of the first slots are stored after the eighth"""
        filters = [SliceEqFilter(id=index + 1) for index in range(10)]
        filters[0].channel_mode = ChannelMode.MID
        filters[6].channel_mode = ChannelMode.SIDE
        filters[7].channel_mode = ChannelMode.MID
        filters[9].channel_mode = ChannelMode.SIDE
        loaded = round_trip(Snapin(SliceEq(filters=filters))).effect_as(SliceEq)
        modes = [f.channel_mode for f in loaded.filters]
        assert modes[0] is ChannelMode.MID
        assert modes[1] is ChannelMode.BOTH
        assert modes[6] is ChannelMode.SIDE
        assert modes[7] is ChannelMode.MID
        assert modes[9] is ChannelMode.SIDE

    def test_parameters(self):
        """Gain, mix, offset and view survive"""
        effect = SliceEq(gain=Decibels(-3.0), mix=0.5, offset_semitones=12.0,
                         oversample_mode=OversampleMode.TIMES_TWO,
                         stereo_mode=StereoMode.LEFT_RIGHT,
                         version_b=Version(1, 2, 3))
        loaded = round_trip(Snapin(effect, group_id=4))
        eq = loaded.effect_as(SliceEq)
        assert eq.gain == Decibels(-3.0)
        assert eq.mix == 0.5
        assert eq.offset_semitones == 12.0
        assert eq.oversample_mode.label == '2X'
        assert eq.stereo_mode is StereoMode.LEFT_RIGHT
        assert eq.version_b == Version(1, 2, 3)
        assert loaded.group_id == 4

    def test_filter_order_range(self):
        """Cut slopes above 96 dB per octave do not exist"""
        effect = SliceEq(filters=[SliceEqFilter(order=8)])
        writer = PresetWriter()
        write_snapin(writer, Snapin(effect))
        with pytest.raises(RangeError, match="Filter order 8"):
            read_snapin(PresetReader(writer.getvalue(), FORMAT_VERSION))

    def test_db_per_octave(self):
        """Order indexes the slope table"""
        assert SliceEqFilter(order=0).db_per_octave == 6
        assert SliceEqFilter(order=7).db_per_octave == 96

    def test_too_many_filters(self):
        """At most 32 filters fit"""
        effect = SliceEq(filters=[SliceEqFilter(id=index) for index in range(33)])
        with pytest.raises(RangeError):
            round_trip(Snapin(effect))

    def test_read_version_kept(self):
        """A Slice EQ read at 1020 is written back as 1020"""
        effect = SliceEq(read_version=1020)
        loaded = round_trip(Snapin(effect))
        assert loaded.effect_version == 1020
        assert loaded.effect.write_version() == 1020


# ==============================================================================
# Carve EQ
# ==============================================================================

class TestCarveEq:
    """Carve EQ bands and header"""

    def test_shape(self):
        """Both channels of band gains survive"""
        effect = CarveEq()
        effect.shape[0, 3] = 0.5
        effect.shape[1, 30] = -0.25
        loaded = round_trip(Snapin(effect)).effect_as(CarveEq)
        assert loaded.shape.shape == (2, 31)
        assert np.array_equal(loaded.shape, effect.shape)

    def test_header_is_kept(self):
        """The header read from the file is written back unchanged"""
        first = round_trip(Snapin(CarveEq())).effect_as(CarveEq)
        assert first.header is not None
        assert first.version_b.major == 6
        second = round_trip(Snapin(first)).effect_as(CarveEq)
        assert second.header == first.header

    def test_metadata(self):
        """Host effects carry their own metadata"""
        snapin = Snapin(CarveEq(), metadata=Metadata(author="Someone", description="Tilt"))
        loaded = round_trip(snapin)
        assert loaded.metadata.author == "Someone"
        assert loaded.metadata.description == "Tilt"

    def test_oldest_layout(self):
        """Version 1022 has no zoom and two trailing words"""
        loaded = round_trip(Snapin(CarveEq(read_version=1022)))
        assert loaded.effect_version == 1022
        view = loaded.effect.spectrum_view
        assert (view.x_min, view.x_max) == (0.0, 0.0)


# ==============================================================================
# Multipass / Snap Heap
# ==============================================================================

class TestOpaqueHosts:
    """Payloads of the hosts that nest snapins"""

    @pytest.mark.parametrize("effect_cls", [Multipass, SnapHeap])
    def test_nested_snapins_intact(self, effect_cls):
        """Every nested snapin is still readable after a round trip"""
        nested = [Snapin(Bitcrush(bits=4.0), position=1),
                  Snapin(Chorus(taps=3), position=2),
                  Snapin(Bitcrush(mix=0.5), position=3, enabled=False)]
        data = nested_payload(effect_cls, nested)
        loaded = round_trip(Snapin(effect_cls(data=data)))
        assert loaded.effect.data == data

        inner = read_nested(loaded.effect.data)
        assert len(inner) == 3
        assert inner[0].effect_as(Bitcrush).bits == 4.0
        assert inner[1].effect_as(Chorus).taps == 3
        assert not inner[2].enabled
        assert [s.position for s in inner] == [1, 2, 3]

    def test_payload_sizes(self):
        """Payload size grows with the effect version"""
        assert SnapHeap.payload_size(1038) == 1849
        assert SnapHeap.payload_size(1050) == 1849 + 10347
        assert SnapHeap.payload_size(1051) == 1849 + 10347 + 128
        assert Multipass.payload_size(1058) == 1957 + 10090 + 149 + 128

    def test_default_payload(self):
        """New instances start with a zeroed payload of the write size"""
        heap = SnapHeap()
        assert len(heap.data) == SnapHeap.payload_size(SnapHeap.WRITE_VERSION)
        assert not any(heap.data)

    def test_read_version_kept(self):
        """An old Snap Heap is written back in its own layout"""
        loaded = round_trip(Snapin(SnapHeap(read_version=1038)))
        assert loaded.effect_version == 1038
        assert len(loaded.effect.data) == 1849

    def test_wrong_payload_size(self):
        """A payload that does not match the version is not written"""
        with pytest.raises(RangeError, match="expected"):
            round_trip(Snapin(Multipass(data=b'abc')))

    def test_older_than_minimum(self):
        """Multipass before 1044 is not readable"""
        heap = Multipass(data=bytes(Multipass.payload_size(1043)), read_version=1043)
        writer = PresetWriter()
        write_snapin(writer, Snapin(heap))
        with pytest.raises(VersionTooOldError, match="not supported"):
            read_snapin(PresetReader(writer.getvalue(), FORMAT_VERSION))


if __name__ == '__main__':
    exit(pytest.main([__file__, '-v']))

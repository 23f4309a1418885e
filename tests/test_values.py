"""
Value Type Tests

Versions, releases, decibels, rates and the small records shared by the
rest of the codec.

Run with: pytest tests/test_values.py -v
"""

import math
import os
import sys

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from phaseplant.errors import PhasePlantError, UnknownEnumError
from phaseplant.values import (Decibels, FrequencyResolution, MacroControl, NoteValue,
                               OutputRange, Rate, SpectrumView, Unison, UnisonMode,
                               default_curve)
from phaseplant.version import (FORMAT_VERSION, MIN_SUPPORTED_RELEASE, WRITE_RELEASE,
                                PhasePlantRelease, Version, is_likely_format_version)


class TestVersion:
    """Four part version ordering"""

    def test_lexicographic_order(self):
        """Major wins over minor, minor over patch"""
        assert Version(2, 0, 0) > Version(1, 99, 99)
        assert Version(6, 2, 1040) > Version(6, 2, 1038)
        assert Version(1, 7, 0).is_at_least(Version(1, 7, 0))
        assert not Version(1, 6, 10).is_at_least(Version(1, 7, 0))

    def test_zero(self):
        """The zero version marks Group snapins"""
        assert Version().is_zero()
        assert not Version(0, 0, 0, 1).is_zero()

    def test_str(self):
        """Extra is only shown when set"""
        assert str(Version(2, 1, 0)) == "2.1.0"
        assert str(Version(2, 1, 0, 3)) == "2.1.0-3"

    def test_release_format_versions(self):
        """Releases map onto the header versions they save"""
        assert PhasePlantRelease.V2_1_0.format_version == Version(6, 2, 1040)
        assert PhasePlantRelease.V1_8_0.format_version == Version(6, 2, 1019)
        assert PhasePlantRelease.V1_7_0.version == Version(1, 7, 0)
        assert FORMAT_VERSION == WRITE_RELEASE.format_version

    def test_release_format_versions_never_decrease(self):
        """Later releases never store an older format"""
        formats = [release.format_version for release in PhasePlantRelease]
        assert formats == sorted(formats)

    def test_likely_format_version(self):
        """Header sniffing accepts only plausible format versions"""
        assert is_likely_format_version(FORMAT_VERSION)
        assert is_likely_format_version(MIN_SUPPORTED_RELEASE.format_version)
        assert not is_likely_format_version(Version(5, 2, 1009))
        assert not is_likely_format_version(Version(6, 3, 1040))


class TestEnums:
    """Stored discriminants"""

    def test_from_id(self):
        """Known values map to members"""
        assert NoteValue.from_id(4) is NoteValue.SIXTEENTH
        assert UnisonMode.from_id(17) is UnisonMode.SHEPARD

    def test_unknown_id(self):
        """Unknown values raise a format error naming the enum"""
        with pytest.raises(UnknownEnumError, match="NoteValue"):
            NoteValue.from_id(42)
        assert issubclass(UnknownEnumError, PhasePlantError)
        assert issubclass(PhasePlantError, ValueError)

    def test_labels(self):
        """Labels are human readable"""
        assert NoteValue.EIGHTH_TRIPLET.label == '1/8T'
        assert FrequencyResolution.THIRD_OF_OCTAVE.label == '1/3 Octave'
        assert UnisonMode.FREQ_STACK.label == 'Freq Stack'
        assert OutputRange.BIPOLAR.symbol == '±'


class TestDecibels:
    """Gain stored as dB or as linear amplitude"""

    def test_from_linear_unity(self):
        """Unity gain is 0 dB"""
        assert Decibels.from_linear(1.0).db == 0.0
        assert Decibels.from_linear(1.0) == Decibels.ZERO

    def test_silence(self):
        """Zero amplitude is minus infinity"""
        silence = Decibels.from_linear(0.0)
        assert silence.db == -math.inf
        assert silence.linear == 0.0
        assert Decibels(-math.inf).linear == 0.0

    def test_linear_value_is_kept(self):
        """A value read as linear writes back the same float"""
        value = Decibels.from_linear(0.123456789)
        assert value.linear == 0.123456789

    def test_db_to_linear(self):
        """Values made from dB convert on demand"""
        assert math.isclose(Decibels(-6.0).linear, 0.501187, rel_tol=1e-5)
        assert str(Decibels(-6.0)) == "-6.00 dB"


class TestRecords:
    """Defaults and helpers of the small records"""

    def test_rate_str(self):
        """Synced rates show the note value"""
        assert str(Rate(2.5)) == "2.5 Hz"
        assert str(Rate(numerator=3, denominator=NoteValue.EIGHTH, sync=True)) == "3 x 1/8"

    def test_unison_defaults(self):
        """Unison starts off with four smooth voices"""
        unison = Unison()
        assert not unison.enabled
        assert unison.voices == 4
        assert unison.mode is UnisonMode.SMOOTH
        assert unison.detune == 25.0
        assert unison.blend == 1.0

    def test_macro_defaults(self):
        """Eight macros named by number"""
        macros = MacroControl.defaults()
        assert len(macros) == 8
        assert macros[0].name == "Macro 1"
        assert macros[7].name == "Macro 8"
        assert str(macros[0]) == '"Macro 1" = 0 +'

    def test_default_curve(self):
        """A fresh curve falls from top left to bottom right"""
        curve = default_curve()
        assert [(p.x, p.y) for p in curve] == [(0.0, 1.0), (1.0, -1.0)]
        assert default_curve() is not curve

    def test_spectrum_view_normalize(self):
        """Normalizing orders both axes"""
        view = SpectrumView(x_min=20000.0, x_max=20.0,
                            y_min=Decibels(12.0), y_max=Decibels(-12.0))
        normal = view.normalize()
        assert (normal.x_min, normal.x_max) == (20.0, 20000.0)
        assert (normal.y_min.db, normal.y_max.db) == (-12.0, 12.0)
        assert view.x_min == 20000.0, "normalize must not change the original"


if __name__ == '__main__':
    exit(pytest.main([__file__, '-v']))

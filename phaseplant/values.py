"""
Shared Value Types

Small records and enumerations used by effects, generators, modulators and the
preset container: decibels, tempo synced rates, envelopes, unison settings,
curve points, macro controls, metadata and spectrum views.

Frequencies are plain floats in Hz, times are seconds and ratios are 0..1.
Decibels get their own type because the file stores them either as dB or as
linear amplitude depending on the field.
"""

import math
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import List, Optional

from .errors import UnknownEnumError


# ==============================================================================
# Enumerations
# ==============================================================================

class WireEnum(Enum):
    """Enumeration whose values are the discriminants stored in the file."""

    @classmethod
    def from_id(cls, value: int) -> 'WireEnum':
        try:
            return cls(value)
        except ValueError:
            raise UnknownEnumError(
                f"Unknown {cls.__name__} {value} ({value:#x})") from None

    @property
    def label(self) -> str:
        return self.name.replace('_', ' ').title()

    def __str__(self) -> str:
        return self.label


class NoteValue(WireEnum):
    """Denominator of a tempo synced rate."""
    QUARTER = 0
    QUARTER_TRIPLET = 1
    EIGHTH = 2
    EIGHTH_TRIPLET = 3
    SIXTEENTH = 4
    SIXTEENTH_TRIPLET = 5
    THIRTY_SECOND = 6
    THIRTY_SECOND_TRIPLET = 7
    SIXTY_FOURTH = 8

    @property
    def label(self) -> str:
        return _NOTE_VALUE_LABELS[self]


_NOTE_VALUE_LABELS = {
    NoteValue.QUARTER: '1/4',
    NoteValue.QUARTER_TRIPLET: '1/4T',
    NoteValue.EIGHTH: '1/8',
    NoteValue.EIGHTH_TRIPLET: '1/8T',
    NoteValue.SIXTEENTH: '1/16',
    NoteValue.SIXTEENTH_TRIPLET: '1/16T',
    NoteValue.THIRTY_SECOND: '1/32',
    NoteValue.THIRTY_SECOND_TRIPLET: '1/32T',
    NoteValue.SIXTY_FOURTH: '1/64',
}


class OutputRange(WireEnum):
    """Polarity of a modulator or macro."""
    UNIPOLAR = 0
    BIPOLAR = 1
    INVERTED = 2

    @property
    def symbol(self) -> str:
        return {OutputRange.UNIPOLAR: '+',
                OutputRange.BIPOLAR: '±',
                OutputRange.INVERTED: '-'}[self]


class LoopMode(WireEnum):
    OFF = 0
    INFINITE = 1
    SUSTAIN = 2
    PING_PONG = 3
    REVERSE = 4


class UnisonMode(WireEnum):
    HARD = 0
    SMOOTH = 1
    SYNTHETIC = 2
    OCTAVES = 3
    FIFTHS = 4
    MINOR = 5
    MAJOR = 6
    MINOR7 = 7
    MAJOR7 = 8
    MINOR_MAJ7 = 9
    MAJOR_MAJ7 = 10
    SUS2 = 11
    SUS4 = 12
    DIM = 13
    HARMONICS = 14
    FREQ_STACK = 15
    PITCH_STACK = 16
    SHEPARD = 17


class CurvePointMode(WireEnum):
    SMOOTH = 0
    SHARP = 1

    @classmethod
    def from_id(cls, value: int) -> 'CurvePointMode':
        # Older presets used 2 and 3
        if value == 2:
            return cls.SMOOTH
        if value == 3:
            return cls.SHARP
        return super().from_id(value)


class StereoMode(WireEnum):
    LEFT_RIGHT = 0
    MID_SIDE = 1

    @property
    def label(self) -> str:
        return 'Left/Right' if self is StereoMode.LEFT_RIGHT else 'Mid/Side'


class FalloffSpeed(WireEnum):
    OFF = 0
    SLOW = 1
    MEDIUM = 2
    FAST = 3


class FrequencyResolution(WireEnum):
    EXACT = 0
    SEMITONE = 1
    THIRD_OF_OCTAVE = 2
    OCTAVE = 3

    @property
    def label(self) -> str:
        if self is FrequencyResolution.THIRD_OF_OCTAVE:
            return '1/3 Octave'
        return super().label


# ==============================================================================
# Decibels
# ==============================================================================

@dataclass(frozen=True)
class Decibels:
    """Gain in decibels.

    A value created from a linear amplitude remembers that amplitude so that
    writing it back as linear reproduces the stored float exactly.
    """
    db: float = 0.0
    _linear: Optional[float] = field(default=None, compare=False, repr=False)

    @classmethod
    def from_linear(cls, linear: float) -> 'Decibels':
        if linear <= 0.0:
            return cls(-math.inf, linear)
        return cls(20.0 * math.log10(linear), linear)

    @property
    def linear(self) -> float:
        if self._linear is not None:
            return self._linear
        if self.db == -math.inf:
            return 0.0
        return 10.0 ** (self.db / 20.0)

    def __str__(self) -> str:
        return f"{self.db:.2f} dB"


Decibels.ZERO = Decibels(0.0)


# ==============================================================================
# Rate / Envelope / Unison / Curves
# ==============================================================================

@dataclass
class Rate:
    """Free running frequency or a tempo synced note length."""
    frequency: float = 1.0
    numerator: int = 4
    denominator: NoteValue = NoteValue.SIXTEENTH
    sync: bool = False

    def __str__(self) -> str:
        if self.sync:
            return f"{self.numerator} x {self.denominator.label}"
        return f"{self.frequency:g} Hz"


@dataclass
class Envelope:
    """Delay, attack, hold, decay, sustain, release contour.

    Curves and falloffs are unitless shape values, sustain is the raw stored
    level and the rest are seconds.
    """
    delay: float = 0.0
    attack: float = -1.01
    attack_curve: float = -1.0
    hold: float = 0.0
    decay: float = -1.1
    decay_falloff: float = -1.0
    sustain: float = 0.0
    release: float = -1.1
    release_falloff: float = -1.0

    SIZE = 9 * 4


@dataclass
class Unison:
    enabled: bool = False
    voices: int = 4
    mode: UnisonMode = UnisonMode.SMOOTH
    detune: float = 25.0
    spread: float = 0.0
    blend: float = 1.0
    bias: float = 0.0

    VOICES_MAX = 8


@dataclass
class CurvePoint:
    x: float = 0.0
    y: float = 0.0
    curve_x: float = 0.0
    curve_y: float = 0.0
    mode: CurvePointMode = CurvePointMode.SMOOTH

    @classmethod
    def smooth(cls, x: float, y: float, curve_x: float = 0.0, curve_y: float = 0.0) -> 'CurvePoint':
        return cls(x, y, curve_x, curve_y, CurvePointMode.SMOOTH)

    @classmethod
    def sharp(cls, x: float, y: float, curve_x: float = 0.0, curve_y: float = 0.0) -> 'CurvePoint':
        return cls(x, y, curve_x, curve_y, CurvePointMode.SHARP)

    @property
    def is_sharp(self) -> bool:
        return self.mode is CurvePointMode.SHARP


def default_curve() -> List[CurvePoint]:
    """Shape of a curve nobody has edited yet."""
    return [CurvePoint.smooth(0.0, 1.0), CurvePoint.smooth(1.0, -1.0)]


# ==============================================================================
# Macros / Metadata / Spectrum
# ==============================================================================

MACRO_COUNT = 8


@dataclass
class MacroControl:
    name: str = "Macro 1"
    value: float = 0.0
    polarity: OutputRange = OutputRange.UNIPOLAR

    def __str__(self) -> str:
        return f'"{self.name}" = {self.value:g} {self.polarity.symbol}'

    @classmethod
    def defaults(cls) -> List['MacroControl']:
        return [cls(f"Macro {index + 1}") for index in range(MACRO_COUNT)]


@dataclass
class Metadata:
    """Descriptive text stored alongside a preset or an effect preset."""
    name: Optional[str] = None
    author: Optional[str] = None
    description: Optional[str] = None

    def is_empty(self) -> bool:
        return self.author is None and self.description is None


@dataclass
class SpectrumView:
    """Zoom of the analyzer in the EQ host effects."""
    frequency_resolution: FrequencyResolution = FrequencyResolution.THIRD_OF_OCTAVE
    falloff_speed: FalloffSpeed = FalloffSpeed.MEDIUM
    x_min: float = 19.0
    x_max: float = 21000.0
    y_min: Decibels = Decibels(-31.5)
    y_max: Decibels = Decibels(31.5)

    def normalize(self) -> 'SpectrumView':
        """Return a copy with both axes in ascending order."""
        view = replace(self)
        if view.x_min > view.x_max:
            view.x_min, view.x_max = view.x_max, view.x_min
        if view.y_min.db > view.y_max.db:
            view.y_min, view.y_max = view.y_max, view.y_min
        return view

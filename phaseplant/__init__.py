"""
Phase Plant
Reader and writer for Kilohearts Phase Plant preset files
"""

__version__ = "1.0.0"

from .errors import (PhasePlantError, ShortReadError, VersionTooOldError, UnknownEnumError,
                     SentinelMismatchError, CrossFieldError, RangeError)
from .version import Version, PhasePlantRelease, FORMAT_VERSION
from .values import (Decibels, Rate, Envelope, Unison, CurvePoint, MacroControl, Metadata,
                     SpectrumView, OutputRange, LoopMode, NoteValue)
from .modulation import Modulation, ModulationSource, ModulationTarget
from .effects import Effect, EffectMode
from .generators import Generator, GeneratorMode
from .modulators import AudioSourceId, Modulator, ModulatorContainer, ModulatorMode
from .snapin import Snapin
from .preset import Preset, Lane, LaneDestination

__all__ = [
    'PhasePlantError',
    'ShortReadError',
    'VersionTooOldError',
    'UnknownEnumError',
    'SentinelMismatchError',
    'CrossFieldError',
    'RangeError',
    'Version',
    'PhasePlantRelease',
    'FORMAT_VERSION',
    'Decibels',
    'Rate',
    'Envelope',
    'Unison',
    'CurvePoint',
    'MacroControl',
    'Metadata',
    'SpectrumView',
    'OutputRange',
    'LoopMode',
    'NoteValue',
    'Modulation',
    'ModulationSource',
    'ModulationTarget',
    'Effect',
    'EffectMode',
    'Generator',
    'GeneratorMode',
    'AudioSourceId',
    'Modulator',
    'ModulatorContainer',
    'ModulatorMode',
    'Snapin',
    'Preset',
    'Lane',
    'LaneDestination',
]

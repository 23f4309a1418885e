"""
Effects
Codecs for every snapin effect kind, registered by EffectMode
"""

from .base import (Effect, EffectMode, EffectReadResult, SidechainMode,
                   effect_class, read_effect)
from .delays import (Convolver, Delay, DualDelay, Haas, Reverb, Reverser,
                     TapeStop)
from .distortion import (Bitcrush, Disperser, Distortion, DistortionMode,
                         Faturator, PhaseDistortion)
from .dynamics import (Compressor, CompressorMode, Dynamics, Gain, Gate,
                       Limiter, TransientShaper)
from .filters import (CombFilter, Filter, FilterMode, FormantFilter,
                      LadderFilter, NonlinearFilter, NonlinearFilterMode,
                      Resonator, ThreeBandEq)
from .hosts import (CarveEq, ChannelMode, Multipass, OversampleMode, SliceEq,
                    SliceEqFilter, SliceEqFilterMode, SnapHeap)
from .modulation_fx import (Chorus, CompensationMode, Ensemble, Flanger,
                            FrequencyShifter, MotionMode, Phaser, PitchShifter,
                            RingMod, RingModulationMode)
from .utility import (ChannelMixer, Group, PatternResolution, Stereo,
                      TranceGate)

__all__ = [
    'Effect',
    'EffectMode',
    'EffectReadResult',
    'SidechainMode',
    'effect_class',
    'read_effect',
    'Bitcrush',
    'CarveEq',
    'ChannelMixer',
    'ChannelMode',
    'Chorus',
    'CombFilter',
    'CompensationMode',
    'Compressor',
    'CompressorMode',
    'Convolver',
    'Delay',
    'Disperser',
    'Distortion',
    'DistortionMode',
    'DualDelay',
    'Dynamics',
    'Ensemble',
    'Faturator',
    'Filter',
    'FilterMode',
    'Flanger',
    'FormantFilter',
    'FrequencyShifter',
    'Gain',
    'Gate',
    'Group',
    'Haas',
    'LadderFilter',
    'Limiter',
    'MotionMode',
    'Multipass',
    'NonlinearFilter',
    'NonlinearFilterMode',
    'OversampleMode',
    'PatternResolution',
    'PhaseDistortion',
    'Phaser',
    'PitchShifter',
    'Resonator',
    'Reverb',
    'Reverser',
    'RingMod',
    'RingModulationMode',
    'SliceEq',
    'SliceEqFilter',
    'SliceEqFilterMode',
    'SnapHeap',
    'Stereo',
    'TapeStop',
    'ThreeBandEq',
    'TranceGate',
    'TransientShaper',
]

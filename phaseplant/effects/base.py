"""
Effect Base

Every effect kind is a dataclass subclass of Effect, registered against its
EffectMode. A kind reads its payload for any supported effect version and
writes the payload for its own write version, gating later fields on that
version exactly like the reader does.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Optional, Type

from ..errors import CrossFieldError, UnknownEnumError, VersionTooOldError
from ..values import Metadata, WireEnum

logger = logging.getLogger(__name__)


def _tag(text: str) -> int:
    return int.from_bytes(text.encode('ascii'), 'little')


# ==============================================================================
# Modes
# ==============================================================================

class EffectMode(WireEnum):
    """Effect kinds. Values are the four character ids stored in presets."""
    BITCRUSH = _tag('ksbc')
    CARVE_EQ = _tag('ksge')
    CHANNEL_MIXER = _tag('kscm')
    CHORUS = _tag('ksch')
    COMB_FILTER = _tag('kscf')
    COMPRESSOR = _tag('kscp')
    CONVOLVER = _tag('ksco')
    DELAY = _tag('ksdl')
    DISPERSER = _tag('kdsp')
    DISTORTION = _tag('ksdt')
    DUAL_DELAY = _tag('ksdd')
    DYNAMICS = _tag('ksot')
    ENSEMBLE = _tag('ksun')
    FATURATOR = _tag('kfat')
    FILTER = _tag('ksfi')
    FLANGER = _tag('ksfl')
    FORMANT_FILTER = _tag('ksvf')
    FREQUENCY_SHIFTER = _tag('ksfs')
    GAIN = _tag('ksgn')
    GATE = _tag('ksgt')
    GROUP = _tag('grup')
    HAAS = _tag('ksha')
    LADDER_FILTER = _tag('ksla')
    LIMITER = _tag('kslt')
    MULTIPASS = _tag('kmup')
    NONLINEAR_FILTER = _tag('ksdf')
    PHASE_DISTORTION = _tag('kspd')
    PHASER = _tag('ksph')
    PITCH_SHIFTER = _tag('ksps')
    RESONATOR = _tag('ksre')
    REVERB = _tag('ksrv')
    REVERSER = _tag('ksrr')
    RING_MOD = _tag('ksrm')
    SLICE_EQ = _tag('kpeq')
    SNAP_HEAP = _tag('kmic')
    STEREO = _tag('ksst')
    TAPE_STOP = _tag('ksts')
    THREE_BAND_EQ = _tag('ksqe')
    TRANCE_GATE = _tag('kstg')
    TRANSIENT_SHAPER = _tag('kstr')

    @property
    def tag(self) -> str:
        return self.value.to_bytes(4, 'little').decode('ascii')

    @property
    def is_host(self) -> bool:
        """Host effects carry their own sub-document framing.

        Slice EQ holds no snapins but is stored the same way.
        """
        return self in (EffectMode.CARVE_EQ, EffectMode.MULTIPASS,
                        EffectMode.SNAP_HEAP, EffectMode.SLICE_EQ)

    @property
    def label(self) -> str:
        return _MODE_LABELS.get(self) or super().label

    @property
    def effect_class(self) -> Type['Effect']:
        return _REGISTRY[self]


_MODE_LABELS = {
    EffectMode.CARVE_EQ: 'Carve EQ',
    EffectMode.SLICE_EQ: 'Slice EQ',
    EffectMode.THREE_BAND_EQ: '3-Band EQ',
}


class SidechainMode(WireEnum):
    """Source of the detector signal for dynamics style effects."""
    OFF = 0xFFFFFFFF
    SIDEBAND = 0x73646230

    @classmethod
    def from_name(cls, name: str) -> 'SidechainMode':
        for mode in cls:
            if mode.label == name:
                return mode
        raise UnknownEnumError(f"Unknown sidechain mode '{name}'")


def read_sidechain(reader) -> SidechainMode:
    """Sidechain id followed by the redundant mode name."""
    start = reader.pos
    sidechain_id = reader.read_u32()
    mode = SidechainMode.from_name(reader.read_string() or '')
    if mode.value != sidechain_id:
        raise CrossFieldError(
            f"Sidechain ID {sidechain_id:#x} does not match mode {mode} at position {start}")
    return mode


def write_sidechain(writer, mode: SidechainMode):
    writer.write_u32(mode.value)
    writer.write_string(mode.label)


# ==============================================================================
# Effect
# ==============================================================================

@dataclass
class EffectReadResult:
    """An effect plus the framing state stored inline with it."""
    effect: 'Effect'
    enabled: bool = True
    minimized: bool = False
    group_id: Optional[int] = None
    metadata: Metadata = field(default_factory=Metadata)
    preset_name: Optional[str] = None
    preset_path: List[str] = field(default_factory=list)
    preset_edited: bool = False


_REGISTRY: Dict[EffectMode, Type['Effect']] = {}


def register_effect(cls):
    _REGISTRY[cls.mode] = cls
    return cls


def effect_class(mode: EffectMode) -> Type['Effect']:
    try:
        return _REGISTRY[mode]
    except KeyError:
        raise UnknownEnumError(f"No codec for effect {mode.tag}") from None


def read_effect(mode: EffectMode, reader, effect_version: int) -> EffectReadResult:
    logger.debug("Reading %s effect version %d at position %d",
                 mode.label, effect_version, reader.pos)
    return effect_class(mode).read(reader, effect_version)


class Effect:
    """Base of all effect kinds.

    Subclasses set ``mode``, ``MIN_VERSION`` (oldest readable layout) and
    ``WRITE_VERSION`` (layout produced by ``write``).
    """
    mode: ClassVar[EffectMode]
    MIN_VERSION: ClassVar[int] = 0
    MAX_VERSION: ClassVar[Optional[int]] = None
    WRITE_VERSION: ClassVar[int] = 0

    @classmethod
    def check_version(cls, effect_version: int):
        if effect_version < cls.MIN_VERSION:
            raise VersionTooOldError(
                f"Version {effect_version} of {cls.mode.label} is not supported, "
                f"the minimum is {cls.MIN_VERSION}")
        if cls.MAX_VERSION is not None and effect_version > cls.MAX_VERSION:
            raise VersionTooOldError(
                f"Version {effect_version} of {cls.mode.label} is newer than {cls.MAX_VERSION}")

    @classmethod
    def read(cls, reader, effect_version: int) -> EffectReadResult:
        raise NotImplementedError

    def write(self, writer, snapin):
        raise NotImplementedError

    def write_version(self) -> int:
        return self.WRITE_VERSION

    def default_snapin(self, position: int = 1):
        """Wrap the effect in a snapin with default framing."""
        from ..snapin import Snapin
        return Snapin(self, position=position)

    @property
    def name(self) -> str:
        return self.mode.label


def result(effect: Effect, enabled: bool, minimized: bool,
           group_id: Optional[int] = None, **extra: Any) -> EffectReadResult:
    return EffectReadResult(effect, enabled, minimized, group_id, **extra)

"""
Modulation Routing

Links from a modulation source to a target parameter. Sources and targets are
stored as 32 bit words: the high half holds the source or target id and the
low half the module id. Every word read from a file is kept exactly so
routing the codec does not understand is still written back unchanged.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .values import WireEnum

MODULATIONS_MAX = 100


class RateMode(Enum):
    """Audio rate targets set the top bit of the target id."""
    AUDIO = 'audio'
    CONTROL = 'control'

    @classmethod
    def split(cls, value: int):
        if value & RATE_MODE_MASK:
            return cls.AUDIO, value & ~RATE_MODE_MASK & 0xFFFF
        return cls.CONTROL, value

    def join(self, target_id: int) -> int:
        if self is RateMode.AUDIO:
            return target_id | RATE_MODE_MASK
        return target_id & ~RATE_MODE_MASK & 0xFFFF


RATE_MODE_MASK = 0x8000


# Module ids with a fixed meaning
LOCAL_MODULE_ID = 0xFFFF
HOST_MODULE_ID = 0xFFFF
MODULATION_MODULE_ID = 0xFFFD


class AudioRateParameter(WireEnum):
    """Low four bits of an audio rate target."""
    FREQUENCY = 0
    PITCH = 1
    PHASE = 2
    RING_MOD = 3
    CUTOFF = 4
    Q = 5
    DRIVE = 6
    AUX = 7
    HARMONIC = 8


# ==============================================================================
# Source
# ==============================================================================

@dataclass(frozen=True)
class ModulationSource:
    """Where a modulation comes from. Only the blank source is decoded."""
    module_id: int = LOCAL_MODULE_ID
    source_id: int = 0

    @classmethod
    def from_id(cls, value: int) -> 'ModulationSource':
        return cls(module_id=value & 0xFFFF, source_id=(value >> 16) & 0xFFFF)

    @classmethod
    def blank(cls) -> 'ModulationSource':
        return cls()

    def id(self) -> int:
        return (self.source_id << 16) | self.module_id

    @property
    def is_blank(self) -> bool:
        return self.module_id == LOCAL_MODULE_ID and self.source_id == 0

    def __str__(self) -> str:
        if self.is_blank:
            return "Blank"
        return f"Module {self.module_id:#x} source {self.source_id:#x}"


# ==============================================================================
# Target
# ==============================================================================

class TargetKind(Enum):
    BLANK = 'blank'
    HOST = 'host'
    MODULATION = 'modulation'
    SNAPIN = 'snapin'


@dataclass(frozen=True)
class ModulationTarget:
    """Parameter a modulation drives.

    Host targets live in module 0xFFFF (target 0 there is the blank target),
    modulation amounts live in module 0xFFFD and every other module id is the
    host id of a snapin.
    """
    module_id: int = HOST_MODULE_ID
    target_id: int = 0
    rate_mode: RateMode = RateMode.CONTROL

    @classmethod
    def from_id(cls, value: int) -> 'ModulationTarget':
        rate_mode, target_id = RateMode.split((value >> 16) & 0xFFFF)
        return cls(value & 0xFFFF, target_id, rate_mode)

    @classmethod
    def blank(cls) -> 'ModulationTarget':
        return cls()

    @classmethod
    def host(cls, target_id: int, rate_mode: RateMode = RateMode.CONTROL) -> 'ModulationTarget':
        return cls(HOST_MODULE_ID, target_id, rate_mode)

    @classmethod
    def modulation(cls, target_id: int,
                   rate_mode: RateMode = RateMode.CONTROL) -> 'ModulationTarget':
        return cls(MODULATION_MODULE_ID, target_id, rate_mode)

    @classmethod
    def snapin(cls, snapin_id: int, target_id: int,
               rate_mode: RateMode = RateMode.CONTROL) -> 'ModulationTarget':
        return cls(snapin_id, target_id, rate_mode)

    def id(self) -> int:
        return (self.rate_mode.join(self.target_id) << 16) | self.module_id

    @property
    def kind(self) -> TargetKind:
        if self.module_id == HOST_MODULE_ID:
            if self.target_id == 0 and self.rate_mode is RateMode.CONTROL:
                return TargetKind.BLANK
            return TargetKind.HOST
        if self.module_id == MODULATION_MODULE_ID:
            return TargetKind.MODULATION
        return TargetKind.SNAPIN

    @property
    def snapin_id(self) -> Optional[int]:
        return self.module_id if self.kind is TargetKind.SNAPIN else None

    @property
    def is_blank(self) -> bool:
        return self.kind is TargetKind.BLANK

    def __str__(self) -> str:
        kind = self.kind
        rate = self.rate_mode.value
        if kind is TargetKind.BLANK:
            return "Blank"
        if kind is TargetKind.SNAPIN:
            return f"Snapin {self.module_id:#x} {rate} target {self.target_id:#x}"
        return f"{kind.value.title()} {rate} target {self.target_id:#x}"


# ==============================================================================
# Modulation
# ==============================================================================

@dataclass
class Modulation:
    """One slot of the routing table. Amount and curve are ratios."""
    source: ModulationSource = field(default_factory=ModulationSource)
    target: ModulationTarget = field(default_factory=ModulationTarget)
    amount: float = 0.0
    curve: float = 0.0
    enabled: bool = True

    def __str__(self) -> str:
        text = f"{self.source} → {self.target} {self.amount * 100.0:g}%"
        if not self.enabled:
            text += " (disabled)"
        return text

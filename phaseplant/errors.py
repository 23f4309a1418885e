"""
Preset decoding errors

Every failure while reading or writing a preset is a PhasePlantError, which
is a ValueError so callers treating bad input generically keep working.
"""


class PhasePlantError(ValueError):
    """Invalid preset data."""


class ShortReadError(PhasePlantError):
    """The stream ended before the expected number of bytes."""


class VersionTooOldError(PhasePlantError):
    """A record version is below the oldest supported layout."""


class UnknownEnumError(PhasePlantError):
    """A stored discriminant or mode name is not recognized."""


class SentinelMismatchError(PhasePlantError):
    """A field with a known constant value held something else."""


class CrossFieldError(PhasePlantError):
    """Two fields that must agree do not."""


class RangeError(PhasePlantError):
    """A numeric field lies outside its legal range."""

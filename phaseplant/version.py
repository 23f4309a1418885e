"""
Format and release versions

A preset header stores the *format* version. Phase Plant product releases map
onto format versions through PhasePlantRelease so that version gates in the
codec can be written in terms of the release that introduced a field.
"""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True, order=True)
class Version:
    """Four part version, compared lexicographically."""
    major: int = 0
    minor: int = 0
    patch: int = 0
    extra: int = 0

    def is_at_least(self, other: 'Version') -> bool:
        return self >= other

    def is_zero(self) -> bool:
        return self == Version()

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.extra:
            text += f"-{self.extra}"
        return text


class PhasePlantRelease(Enum):
    """Phase Plant product releases whose file format is understood."""
    V1_6_9 = (1, 6, 9)
    V1_6_10 = (1, 6, 10)
    V1_7_0 = (1, 7, 0)
    V1_7_1 = (1, 7, 1)
    V1_7_3 = (1, 7, 3)
    V1_7_4 = (1, 7, 4)
    V1_7_5 = (1, 7, 5)
    V1_7_11 = (1, 7, 11)
    V1_8_0 = (1, 8, 0)
    V1_8_4 = (1, 8, 4)
    V1_8_5 = (1, 8, 5)
    V1_8_9 = (1, 8, 9)
    V1_8_11 = (1, 8, 11)
    V1_8_28 = (1, 8, 28)
    V2_0_0 = (2, 0, 0)
    V2_0_11 = (2, 0, 11)
    V2_0_12 = (2, 0, 12)
    V2_0_13 = (2, 0, 13)
    V2_0_16 = (2, 0, 16)
    V2_1_0 = (2, 1, 0)

    @property
    def version(self) -> Version:
        """Product version shown to users."""
        return Version(*self.value)

    @property
    def format_version(self) -> Version:
        """Version stored in the header of presets saved by this release."""
        return _FORMAT_VERSIONS[self]

    def __str__(self) -> str:
        return str(self.version)


_FORMAT_VERSIONS = {
    PhasePlantRelease.V1_6_9: Version(5, 2, 1010),
    PhasePlantRelease.V1_6_10: Version(5, 2, 1011),
    PhasePlantRelease.V1_7_0: Version(5, 2, 1012),
    PhasePlantRelease.V1_7_1: Version(5, 2, 1012),
    PhasePlantRelease.V1_7_3: Version(5, 2, 1013),
    PhasePlantRelease.V1_7_4: Version(5, 2, 1015),
    PhasePlantRelease.V1_7_5: Version(5, 2, 1016),
    PhasePlantRelease.V1_7_11: Version(5, 2, 1016),
    PhasePlantRelease.V1_8_0: Version(6, 2, 1019),
    PhasePlantRelease.V1_8_4: Version(6, 2, 1019),
    PhasePlantRelease.V1_8_5: Version(6, 2, 1024),
    PhasePlantRelease.V1_8_9: Version(6, 2, 1024),
    PhasePlantRelease.V1_8_11: Version(6, 2, 1024),
    PhasePlantRelease.V1_8_28: Version(6, 2, 1024),
    PhasePlantRelease.V2_0_0: Version(6, 2, 1036),
    PhasePlantRelease.V2_0_11: Version(6, 2, 1036),
    PhasePlantRelease.V2_0_12: Version(6, 2, 1037),
    PhasePlantRelease.V2_0_13: Version(6, 2, 1038),
    PhasePlantRelease.V2_0_16: Version(6, 2, 1038),
    PhasePlantRelease.V2_1_0: Version(6, 2, 1040),
}

MIN_SUPPORTED_RELEASE = PhasePlantRelease.V1_6_9

# Presets are always written in the newest understood layout
WRITE_RELEASE = PhasePlantRelease.V2_1_0
FORMAT_VERSION = WRITE_RELEASE.format_version


def is_likely_format_version(version: Version) -> bool:
    """Cheap sniff test used before committing to a full read."""
    return (version.minor == 2
            and version.patch >= 1010
            and version >= MIN_SUPPORTED_RELEASE.format_version)

import re
from dataclasses import dataclass

_SEMVER = re.compile(r"^v?(\d+)\.(\d+)\.(\d+)(?:[-+].*)?$")


@dataclass(frozen=True)
class Version:
    """Semantic version triple plus the display string it was parsed from."""
    major: int
    minor: int
    patch: int
    display: str = ""

    @classmethod
    def parse(cls, value: str) -> 'Version':
        match = _SEMVER.match(value.strip())
        if not match:
            raise ValueError(f"Invalid semantic version: {value}")
        major, minor, patch = (int(g) for g in match.groups())
        return cls(major, minor, patch, value.strip())

    def __str__(self) -> str:
        return self.display or f"{self.major}.{self.minor}.{self.patch}"

    def to_dict(self):
        return {
            "version": str(self),
            "major": self.major,
            "minor": self.minor,
            "patch": self.patch,
        }

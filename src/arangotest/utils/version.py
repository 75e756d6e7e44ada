"""
Server version parsing and comparison
"""

import re
from typing import Callable, Union


class Version(str):
    """ArangoDB version string such as '3.11.4' or '3.12.0-devel'"""

    @property
    def _parts(self):
        return (self.split(".", 2) + ["", "", ""])[:3]

    def major(self) -> int:
        return _leading_int(self._parts[0])

    def minor(self) -> int:
        return _leading_int(self._parts[1])

    def sub(self) -> str:
        return self._parts[2]

    def sub_int(self) -> int:
        return _leading_int(self.sub())

    def compare_to(self, other: Union["Version", str]) -> int:
        """Return -1, 0 or 1 ordering by major, minor, numeric sub and finally sub text"""
        other = Version(other)
        for a, b in ((self.major(), other.major()),
                     (self.minor(), other.minor()),
                     (self.sub_int(), other.sub_int())):
            if a != b:
                return -1 if a < b else 1
        if self.sub() != other.sub():
            return -1 if self.sub() < other.sub() else 1
        return 0


def _leading_int(value: str) -> int:
    match = re.match(r"\d+", value)
    return int(match.group(0)) if match else 0


class VersionChecker:
    """Predicate over a server version, combinable with or_/and_"""

    def __init__(self, check: Callable[[Version], bool], description: str):
        self._check = check
        self._description = description

    def check(self, version: Union[Version, str]) -> bool:
        return self._check(Version(version))

    def describe(self, version: Union[Version, str]) -> str:
        return f"{self._description} (got {version})"

    def or_(self, other: "VersionChecker") -> "VersionChecker":
        return VersionChecker(lambda v: self.check(v) or other.check(v),
                              f"({self._description} OR {other._description})")

    def and_(self, other: "VersionChecker") -> "VersionChecker":
        return VersionChecker(lambda v: self.check(v) and other.check(v),
                              f"({self._description} AND {other._description})")

    def __repr__(self) -> str:
        return f"VersionChecker({self._description})"


class Compare:
    def __init__(self, symbol: str, predicate: Callable[[int], bool]):
        self.symbol = symbol
        self._predicate = predicate

    def than(self, version: Union[Version, str]) -> VersionChecker:
        version = Version(version)
        return VersionChecker(lambda v: self._predicate(v.compare_to(version)), f"{self.symbol} {version}")


GT = Compare(">", lambda c: c > 0)
GE = Compare(">=", lambda c: c >= 0)
LT = Compare("<", lambda c: c < 0)
LE = Compare("<=", lambda c: c <= 0)
EQ = Compare("==", lambda c: c == 0)
NE = Compare("!=", lambda c: c != 0)


def minimum_version(version: Union[Version, str]) -> VersionChecker:
    return GE.than(version)


def _minor_window(version: Version):
    curr_minor = Version(f"{version.major()}.{version.minor()}.0")
    next_minor = Version(f"{version.major()}.{version.minor() + 1}.0")
    return curr_minor, next_minor


def above_patch_release(version: Union[Version, str]) -> VersionChecker:
    """Versions outside the minor line of `version`, or at/after `version` inside it"""
    version = Version(version)
    curr_minor, next_minor = _minor_window(version)
    return LT.than(curr_minor).or_(GE.than(next_minor)).or_(LT.than(next_minor).and_(GE.than(version)))


def below_patch_release(version: Union[Version, str]) -> VersionChecker:
    """Versions outside the minor line of `version`, or before `version` inside it"""
    version = Version(version)
    curr_minor, next_minor = _minor_window(version)
    return LT.than(curr_minor).or_(GE.than(next_minor)).or_(LT.than(next_minor).and_(LT.than(version)))

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Iterable


@dataclass(frozen=True)
class Symbol:
    name: str
    is_undefined: bool = False


@dataclass(frozen=True)
class FilteredResult:
    export: tuple[str, ...] = field(default_factory=tuple)
    strip: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def empty(cls) -> "FilteredResult":
        return cls()

    @classmethod
    def concat(cls, results: Iterable["FilteredResult"]) -> "FilteredResult":
        export: list[str] = []
        strip: list[str] = []
        for result in results:
            export.extend(result.export)
            strip.extend(result.strip)
        return cls(export=tuple(export), strip=tuple(strip))

    def merge(self, other: "FilteredResult") -> "FilteredResult":
        """Append ``other`` after this result on both sides."""
        return FilteredResult(export=self.export + other.export, strip=self.strip + other.strip)

    def with_forced_export(self, names: Iterable[str]) -> "FilteredResult":
        return FilteredResult(export=tuple(names) + self.export, strip=self.strip)

    @property
    def is_empty(self) -> bool:
        return not self.export and not self.strip

    @property
    def total(self) -> int:
        return len(self.export) + len(self.strip)

    def name_counts(self) -> Counter:
        """Multiset of every name in the result, regardless of side."""
        return Counter(self.export) + Counter(self.strip)

    def to_dict(self) -> dict[str, Any]:
        return {
            "export": list(self.export),
            "strip": list(self.strip),
        }

from typing import Protocol, Sequence, runtime_checkable

from symfilter.filtering.domain.entities import FilteredResult
from symfilter.filtering.domain.rules import CompiledPatternSet, CompiledRules


@runtime_checkable
class DecisionPolicy(Protocol):
    """Splits defined symbol names into export and strip without keeping state."""

    name: str

    def classify(self, names: Sequence[str]) -> FilteredResult: ...


class ExportAllPolicy:
    name = "export"

    def classify(self, names: Sequence[str]) -> FilteredResult:
        return FilteredResult(export=tuple(names), strip=())


class StripAllPolicy:
    name = "strip"

    def classify(self, names: Sequence[str]) -> FilteredResult:
        return FilteredResult(export=(), strip=tuple(names))


class RuleBasedPolicy:
    name = "filter"

    def __init__(self, matcher: CompiledPatternSet, export_matching: bool = True) -> None:
        self._matcher = matcher
        self._export_matching = export_matching

    @classmethod
    def from_rules(cls, rules: CompiledRules) -> "RuleBasedPolicy":
        return cls(matcher=rules.matcher, export_matching=rules.export_matching)

    @property
    def export_matching(self) -> bool:
        return self._export_matching

    @property
    def matcher(self) -> CompiledPatternSet:
        return self._matcher

    def classify(self, names: Sequence[str]) -> FilteredResult:
        """Names matching any pattern go to export, or to strip when ``export_matching`` is false."""
        matched: list[str] = []
        not_matched: list[str] = []
        for name in names:
            if self._matcher.is_match(name):
                matched.append(name)
            else:
                not_matched.append(name)
        if self._export_matching:
            return FilteredResult(export=tuple(matched), strip=tuple(not_matched))
        return FilteredResult(export=tuple(not_matched), strip=tuple(matched))

import re
from dataclasses import dataclass
from typing import Any, Mapping, Pattern

from symfilter.filtering.domain.errors import ConfigurationError, PatternCompileError

EXPORT_MATCHING_KEY = "export_matching"
RULES_KEY = "rules"
REGEX_KEY = "regex"
EXACT_KEY = "exact"


@dataclass(frozen=True)
class CompiledPatternSet:
    sources: tuple[str, ...]
    patterns: tuple[Pattern[str], ...]

    @classmethod
    def compile(cls, sources: list[str] | tuple[str, ...]) -> "CompiledPatternSet":
        if not sources:
            raise ConfigurationError("no regex or exact rules given")
        compiled: list[Pattern[str]] = []
        for source in sources:
            try:
                compiled.append(re.compile(source))
            except re.error as exc:
                raise PatternCompileError(source, str(exc)) from exc
        return cls(sources=tuple(sources), patterns=tuple(compiled))

    def is_match(self, name: str) -> bool:
        return any(pattern.search(name) for pattern in self.patterns)

    def __len__(self) -> int:
        return len(self.patterns)


@dataclass(frozen=True)
class CompiledRules:
    export_matching: bool
    matcher: CompiledPatternSet


def exact_pattern(value: str) -> str:
    # The value is not escaped: metacharacters in an "exact" rule keep their regex meaning.
    # \Z rather than $, which would also accept a trailing newline.
    return f"^{value}\\Z"


def compile_rule_document(document: Any) -> CompiledRules:
    """Validate a parsed rule document and compile its patterns.

    Expected shape::

        export_matching: true      # optional, defaults to true
        rules:
          regex: <string | list of strings>
          exact: <string | list of strings>

    Raises ``ConfigurationError`` for structural problems and
    ``PatternCompileError`` when a pattern is not a valid regex.
    """
    if not isinstance(document, Mapping):
        raise ConfigurationError("rule document must be a mapping")

    export_matching = document.get(EXPORT_MATCHING_KEY, True)
    if not isinstance(export_matching, bool):
        raise ConfigurationError(f"'{EXPORT_MATCHING_KEY}' must be a boolean")

    if RULES_KEY not in document:
        raise ConfigurationError(f"'{RULES_KEY}' must be present")
    rules = document[RULES_KEY]
    if not isinstance(rules, Mapping):
        raise ConfigurationError(f"'{RULES_KEY}' must be a mapping")

    sources: list[str] = []
    if REGEX_KEY in rules:
        sources.extend(_string_or_list(rules[REGEX_KEY], REGEX_KEY))
    if EXACT_KEY in rules:
        sources.extend(exact_pattern(value) for value in _string_or_list(rules[EXACT_KEY], EXACT_KEY))

    return CompiledRules(export_matching=export_matching, matcher=CompiledPatternSet.compile(sources))


def _string_or_list(value: Any, key: str) -> list[str]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        if not all(isinstance(item, str) for item in value):
            raise ConfigurationError(f"every '{key}' entry must be a string")
        return list(value)
    raise ConfigurationError(f"'{key}' must be a string or a list of strings")

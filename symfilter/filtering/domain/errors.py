class SymbolFilterError(Exception):
    kind = "error"


class FormatParseError(SymbolFilterError):
    kind = "format_parse"


class RuleError(SymbolFilterError):
    kind = "rule"


class RuleFileError(RuleError):
    kind = "rule_io"


class RuleParseError(RuleError):
    kind = "rule_yaml"


class ConfigurationError(RuleError):
    kind = "configuration"

    def __init__(self, message: str = "configuration is not valid") -> None:
        super().__init__(message)


class PatternCompileError(RuleError):
    kind = "pattern_compile"

    def __init__(self, pattern: str, reason: str) -> None:
        super().__init__(f"invalid regex {pattern!r}: {reason}")
        self.pattern = pattern
        self.reason = reason

"""Filtering domain: symbols, decision policies and rule compilation."""

from symfilter.filtering.domain.entities import FilteredResult, Symbol
from symfilter.filtering.domain.policies import DecisionPolicy, ExportAllPolicy, RuleBasedPolicy, StripAllPolicy
from symfilter.filtering.domain.rules import CompiledPatternSet, CompiledRules, compile_rule_document

__all__ = [
    "CompiledPatternSet",
    "CompiledRules",
    "DecisionPolicy",
    "ExportAllPolicy",
    "FilteredResult",
    "RuleBasedPolicy",
    "StripAllPolicy",
    "Symbol",
    "compile_rule_document",
]

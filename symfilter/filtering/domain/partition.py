from dataclasses import dataclass
from typing import Iterable

from symfilter.filtering.domain.entities import Symbol


@dataclass(frozen=True)
class SymbolPartition:
    forced_export: tuple[str, ...]
    candidates: tuple[str, ...]


def partition_symbols(symbols: Iterable[Symbol]) -> SymbolPartition:
    # Undefined symbols need to stay visible for dynamic linking.
    forced_export: list[str] = []
    candidates: list[str] = []
    for symbol in symbols:
        if symbol.is_undefined:
            forced_export.append(symbol.name)
        else:
            candidates.append(symbol.name)
    return SymbolPartition(forced_export=tuple(forced_export), candidates=tuple(candidates))

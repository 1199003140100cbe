from typing import Iterable

import lief

from symfilter.config.logger_config import logger
from symfilter.filtering.application.contracts import ArchiveImage, ParsedImage, SymbolImage, UnsupportedImage
from symfilter.filtering.application.ports import ObjectSourcePort
from symfilter.filtering.domain.entities import Symbol
from symfilter.filtering.domain.errors import FormatParseError
from symfilter.filtering.infrastructure.sources.ar_archive import is_archive, read_members
from symfilter.filtering.infrastructure.sources.elf_layout import check_elf_layout

ELF_MAGIC = b"\x7fELF"
MACHO_MAGICS = (
    b"\xfe\xed\xfa\xce",  # MH_MAGIC
    b"\xce\xfa\xed\xfe",  # MH_CIGAM
    b"\xfe\xed\xfa\xcf",  # MH_MAGIC_64
    b"\xcf\xfa\xed\xfe",  # MH_CIGAM_64
)
FAT_MAGICS = (
    b"\xca\xfe\xba\xbe",  # FAT_MAGIC
    b"\xca\xfe\xba\xbf",  # FAT_MAGIC_64
)
PE_MAGIC = b"MZ"

# ELF
SHN_UNDEF = 0
STT_SECTION = 3
# Mach-O nlist n_type
N_STAB = 0xE0
N_TYPE = 0x0E
N_UNDF = 0x00


def detect_format(data: bytes) -> str:
    head = data[:8]
    if head.startswith(ELF_MAGIC):
        return "elf"
    if head[:4] in MACHO_MAGICS:
        return "macho"
    if head[:4] in FAT_MAGICS:
        return "fat"
    if is_archive(data):
        return "archive"
    if head.startswith(PE_MAGIC):
        return "pe"
    return "unknown"


class LiefObjectSource(ObjectSourcePort):
    """Object source backed by lief for ELF/Mach-O and the ar reader for archives.

    Universal (fat) Mach-O files, PE images and unrecognised buffers are
    reported as ``UnsupportedImage`` rather than errors.
    """

    def __init__(self, quiet: bool = True) -> None:
        if quiet:
            lief.logging.disable()

    def parse(self, data: bytes) -> ParsedImage:
        kind = detect_format(data)
        if kind == "elf":
            return SymbolImage(symbols=tuple(self._elf_symbols(data)), format_name="elf")
        if kind == "macho":
            return SymbolImage(symbols=tuple(self._macho_symbols(data)), format_name="macho")
        if kind == "archive":
            return ArchiveImage(members=read_members(data))
        logger.debug("No symbol reader for buffer: kind={}, size={}", kind, len(data))
        return UnsupportedImage(kind=kind)

    def _elf_symbols(self, data: bytes) -> Iterable[Symbol]:
        check_elf_layout(data)
        binary = self._lief_parse(lief.ELF.parse, data, "ELF")
        for symbol in _elf_symbol_table(binary):
            name = symbol.name
            if not name or int(symbol.type) == STT_SECTION:
                continue
            yield Symbol(name=name, is_undefined=int(symbol.shndx) == SHN_UNDEF)

    def _macho_symbols(self, data: bytes) -> Iterable[Symbol]:
        fat = self._lief_parse(lief.MachO.parse, data, "Mach-O")
        if fat.size < 1:
            raise FormatParseError("Mach-O image contains no binary")
        binary = fat.at(0)
        for symbol in binary.symbols:
            name = symbol.name
            raw_type = int(symbol.raw_type)
            # Debugger (stab) entries are not linkage symbols.
            if not name or raw_type & N_STAB:
                continue
            yield Symbol(name=name, is_undefined=(raw_type & N_TYPE) == N_UNDF)

    @staticmethod
    def _lief_parse(parser, data: bytes, format_name: str):
        try:
            parsed = parser(list(data))
        except Exception as exc:
            raise FormatParseError(f"malformed {format_name} image: {exc}") from exc
        if parsed is None:
            raise FormatParseError(f"malformed {format_name} image")
        return parsed


def _elf_symbol_table(binary) -> list:
    """The ``.symtab`` entries, or ``.dynsym`` when the image has been stripped.

    ``binary.symbols`` walks both tables, which lists every dynamic symbol twice.
    """
    table = getattr(binary, "symtab_symbols", None)
    if table is None:
        # lief < 0.15
        table = binary.static_symbols
    symbols = list(table)
    if symbols:
        return symbols
    return list(binary.dynamic_symbols)

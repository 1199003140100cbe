"""Bounds checks on the parts of an ELF image the symbol reader depends on.

lief returns a partially populated binary for truncated or corrupt input
instead of failing, so the section header table and every symbol table (with
its string table) are checked against the buffer length first.
"""

import struct
from dataclasses import dataclass

from symfilter.filtering.domain.errors import FormatParseError

EI_CLASS = 4
EI_DATA = 5
ELFCLASS32 = 1
ELFCLASS64 = 2
ELFDATA2LSB = 1
ELFDATA2MSB = 2

SHT_SYMTAB = 2
SHT_NOBITS = 8
SHT_DYNSYM = 11


@dataclass(frozen=True)
class _ClassLayout:
    header_size: int
    shoff_format: str
    shoff_at: int
    shentsize_at: int
    section_format: str


_LAYOUTS = {
    ELFCLASS32: _ClassLayout(header_size=52, shoff_format="I", shoff_at=0x20, shentsize_at=0x2E, section_format="10I"),
    ELFCLASS64: _ClassLayout(
        header_size=64, shoff_format="Q", shoff_at=0x28, shentsize_at=0x3A, section_format="IIQQQQIIQQ"
    ),
}


@dataclass(frozen=True)
class SectionHeader:
    sh_type: int
    sh_offset: int
    sh_size: int
    sh_link: int


def check_elf_layout(data: bytes) -> None:
    if len(data) < 6:
        raise FormatParseError("truncated ELF identification")
    layout = _LAYOUTS.get(data[EI_CLASS])
    if layout is None:
        raise FormatParseError(f"unknown ELF class {data[EI_CLASS]}")
    if data[EI_DATA] == ELFDATA2LSB:
        order = "<"
    elif data[EI_DATA] == ELFDATA2MSB:
        order = ">"
    else:
        raise FormatParseError(f"unknown ELF data encoding {data[EI_DATA]}")
    if len(data) < layout.header_size:
        raise FormatParseError(f"truncated ELF header: {len(data)} of {layout.header_size} bytes")

    (shoff,) = struct.unpack_from(order + layout.shoff_format, data, layout.shoff_at)
    shentsize, shnum = struct.unpack_from(order + "HH", data, layout.shentsize_at)
    if shoff == 0:
        # No section headers: lief falls back to the dynamic segment.
        return

    section_struct = struct.Struct(order + layout.section_format)
    if shentsize < section_struct.size:
        raise FormatParseError(f"ELF section header entries too small: {shentsize} bytes")

    def section_at(index: int) -> SectionHeader:
        start = shoff + index * shentsize
        if start + section_struct.size > len(data):
            raise FormatParseError(f"ELF section header {index} lies outside the file")
        fields = section_struct.unpack_from(data, start)
        # sh_name, sh_type, sh_flags, sh_addr, sh_offset, sh_size, sh_link, ...
        return SectionHeader(sh_type=fields[1], sh_offset=fields[4], sh_size=fields[5], sh_link=fields[6])

    if shnum == 0:
        # Extended numbering keeps the real count in section 0's sh_size.
        shnum = section_at(0).sh_size
    if shoff + shnum * shentsize > len(data):
        raise FormatParseError(
            f"ELF section header table ({shnum} x {shentsize} bytes at {shoff}) extends past end of file ({len(data)} bytes)"
        )

    sections = [section_at(index) for index in range(shnum)]
    for index, section in enumerate(sections):
        if section.sh_type not in (SHT_SYMTAB, SHT_DYNSYM):
            continue
        _check_contents(section, index, len(data))
        if section.sh_link >= shnum:
            raise FormatParseError(f"ELF symbol table {index} links to missing string table {section.sh_link}")
        _check_contents(sections[section.sh_link], section.sh_link, len(data))


def _check_contents(section: SectionHeader, index: int, size: int) -> None:
    if section.sh_type == SHT_NOBITS:
        return
    if section.sh_offset + section.sh_size > size:
        raise FormatParseError(
            f"ELF section {index} ({section.sh_size} bytes at {section.sh_offset}) extends past end of file ({size} bytes)"
        )

"""Reader for Unix ``ar`` archives (static libraries).

Both member naming schemes are handled:

* GNU/SysV: names end with ``/``; long names live in the ``//`` member and are
  referenced as ``/<offset>``; the symbol index is ``/`` (or ``/SYM64/``).
* BSD: long names are stored as ``#1/<length>`` with the name prepended to the
  member data; the symbol index is ``__.SYMDEF`` (and its sorted/64-bit forms).

Index and name-table members are never yielded.
"""

from typing import Iterator

from symfilter.filtering.application.contracts import ArchiveMember
from symfilter.filtering.domain.errors import FormatParseError

AR_MAGIC = b"!<arch>\n"
HEADER_SIZE = 60
HEADER_END = b"`\n"

_GNU_INDEX_NAMES = {"/", "/SYM64/", "/<ECSYMBOLS>/"}
_GNU_NAME_TABLE = "//"
_BSD_INDEX_PREFIX = "__.SYMDEF"
_BSD_LONG_NAME_PREFIX = "#1/"


def is_archive(data: bytes) -> bool:
    return data.startswith(AR_MAGIC)


def read_members(data: bytes) -> tuple[ArchiveMember, ...]:
    return tuple(iter_members(data))


def iter_members(data: bytes) -> Iterator[ArchiveMember]:
    if not is_archive(data):
        raise FormatParseError("not an ar archive: bad magic")

    offset = len(AR_MAGIC)
    long_names: bytes | None = None
    while offset < len(data):
        if len(data) - offset < HEADER_SIZE:
            # A single trailing newline is padding some writers leave behind.
            if data[offset:].strip(b"\n") == b"":
                break
            raise FormatParseError(f"truncated ar member header at offset {offset}")

        header = data[offset : offset + HEADER_SIZE]
        if header[58:60] != HEADER_END:
            raise FormatParseError(f"bad ar member header terminator at offset {offset}")

        raw_name = header[0:16].decode("ascii", errors="replace").rstrip(" ")
        size = _parse_size(header[48:58], offset)
        body_start = offset + HEADER_SIZE
        body_end = body_start + size
        if body_end > len(data):
            raise FormatParseError(f"ar member at offset {offset} overruns the archive ({size} bytes)")
        body = data[body_start:body_end]
        # Member data is aligned to an even offset.
        offset = body_end + (body_end % 2)

        if raw_name in _GNU_INDEX_NAMES or raw_name.startswith(_BSD_INDEX_PREFIX):
            continue
        if raw_name == _GNU_NAME_TABLE:
            long_names = body
            continue

        if raw_name.startswith(_BSD_LONG_NAME_PREFIX):
            name_length = _parse_int(raw_name[len(_BSD_LONG_NAME_PREFIX) :], offset, "BSD name length")
            if name_length > len(body):
                raise FormatParseError(f"BSD member name longer than member data: {raw_name}")
            name = body[:name_length].rstrip(b"\x00").decode("utf-8", errors="replace")
            body = body[name_length:]
            if name.startswith(_BSD_INDEX_PREFIX):
                continue
        elif raw_name.startswith("/") and raw_name[1:].isdigit():
            name = _lookup_long_name(long_names, int(raw_name[1:]))
        else:
            name = raw_name[:-1] if raw_name.endswith("/") else raw_name

        yield ArchiveMember(name=name, data=body)


def _parse_size(field: bytes, offset: int) -> int:
    return _parse_int(field.decode("ascii", errors="replace").strip(), offset, "member size")


def _parse_int(text: str, offset: int, what: str) -> int:
    if not text.isdigit():
        raise FormatParseError(f"invalid {what} {text!r} in ar header at offset {offset}")
    return int(text)


def _lookup_long_name(long_names: bytes | None, index: int) -> str:
    if long_names is None:
        raise FormatParseError(f"long member name /{index} used without a name table")
    if index >= len(long_names):
        raise FormatParseError(f"long member name offset {index} outside the name table")
    end = long_names.find(b"\n", index)
    entry = long_names[index:] if end == -1 else long_names[index:end]
    return entry.decode("utf-8", errors="replace").rstrip("/")

from symfilter.filtering.application.contracts import ArchiveImage, ArchiveMember, SymbolImage, UnsupportedImage
from symfilter.filtering.domain.entities import Symbol
from symfilter.filtering.domain.errors import ConfigurationError, FormatParseError


class FakeObjectSource:
    """Maps buffers to pre-built images; unknown buffers raise FormatParseError."""

    def __init__(self, images: dict[bytes, object]) -> None:
        self.images = images
        self.parsed: list[bytes] = []

    def parse(self, data: bytes):
        self.parsed.append(data)
        if data not in self.images:
            raise FormatParseError(f"corrupt buffer {data!r}")
        return self.images[data]


class DictRuleLoader:
    def __init__(self, documents: dict[str, object]) -> None:
        self.documents = documents

    def load(self, path: str):
        if path not in self.documents:
            raise ConfigurationError(f"unknown rule file {path}")
        return self.documents[path]


class RecordingSink:
    def __init__(self) -> None:
        self.started: list[str] = []
        self.outcomes = []
        self.finished = False

    def start_file(self, job) -> None:
        self.started.append(job.path)

    def write_outcome(self, outcome) -> None:
        self.outcomes.append(outcome)

    def finish(self) -> None:
        self.finished = True


def image(*symbols: tuple[str, bool]) -> SymbolImage:
    return SymbolImage(symbols=tuple(Symbol(name, undefined) for name, undefined in symbols))


def archive(*members: tuple[str, bytes]) -> ArchiveImage:
    return ArchiveImage(members=tuple(ArchiveMember(name=name, data=data) for name, data in members))


FAT = UnsupportedImage(kind="fat")

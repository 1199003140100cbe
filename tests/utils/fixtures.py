from pathlib import Path

# Built by tests/fixtures/elf/build.sh
ELF_FIXTURES = Path(__file__).resolve().parents[1] / "fixtures" / "elf"


def elf_fixture(name: str) -> Path:
    return ELF_FIXTURES / name


def elf_fixture_bytes(name: str) -> bytes:
    return elf_fixture(name).read_bytes()

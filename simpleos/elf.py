"""Reading and validating 32-bit little-endian ELF executables."""

from __future__ import annotations

import struct
from dataclasses import dataclass

ELF_MAGIC = b"\x7fELF"
EI_CLASS = 4
EI_DATA = 5
EI_VERSION = 6
ELFCLASS32 = 1
ELFDATA2LSB = 1
EV_CURRENT = 1
ET_REL = 1
ET_EXEC = 2
EM_386 = 3
PT_NULL = 0
PT_LOAD = 1

_EHDR = struct.Struct("<16sHHIIIIIHHHHHH")
_PHDR = struct.Struct("<IIIIIIII")
EHDR_SIZE = _EHDR.size
PHDR_SIZE = _PHDR.size


class ElfError(ValueError):
    """The data is not an ELF file this loader can handle."""


@dataclass(frozen=True)
class ElfHeader:
    ident: bytes
    type: int
    machine: int
    version: int
    entry: int
    phoff: int
    shoff: int
    flags: int
    ehsize: int
    phentsize: int
    phnum: int
    shentsize: int
    shnum: int
    shstrndx: int


@dataclass(frozen=True)
class ProgramHeader:
    type: int
    offset: int
    vaddr: int
    paddr: int
    filesz: int
    memsz: int
    flags: int
    align: int

    def contains(self, address: int) -> bool:
        """Whether address lies within this segment's memory image."""
        return self.vaddr <= address < self.vaddr + self.memsz


def parse_elf_header(data: bytes) -> ElfHeader:
    """Decode the ELF header at the start of data."""
    if len(data) < EHDR_SIZE:
        raise ElfError(f"file too short for an ELF header: {len(data)} bytes")
    return ElfHeader(*_EHDR.unpack_from(data, 0))


def parse_program_headers(data: bytes, header: ElfHeader) -> list[ProgramHeader]:
    """Decode the program header table described by header."""
    if header.phnum and header.phentsize < PHDR_SIZE:
        raise ElfError(f"program header entry size too small: {header.phentsize}")
    end = header.phoff + header.phentsize * header.phnum
    if end > len(data):
        raise ElfError("program header table extends past end of file")
    return [
        ProgramHeader(*_PHDR.unpack_from(data, header.phoff + n * header.phentsize))
        for n in range(header.phnum)
    ]


def check_elf_file(header: ElfHeader) -> ElfHeader:
    """Check the ELF magic bytes, raising ElfError naming the first bad one."""
    for position, expected in enumerate(ELF_MAGIC):
        if header.ident[position] != expected:
            raise ElfError(f"ELF Header EI_MAG{position} incorrect.")
    return header


def check_supported(header: ElfHeader) -> ElfHeader:
    """Check that the file is a 32-bit little-endian i386 executable or object."""
    try:
        check_elf_file(header)
    except ElfError as exc:
        raise ElfError("Invalid ELF File.") from exc
    if header.ident[EI_CLASS] != ELFCLASS32:
        raise ElfError("Unsupported ELF File Class.")
    if header.ident[EI_DATA] != ELFDATA2LSB:
        raise ElfError("Unsupported ELF File byte order.")
    if header.machine != EM_386:
        raise ElfError("Unsupported ELF File target.")
    if header.ident[EI_VERSION] != EV_CURRENT:
        raise ElfError("Unsupported ELF File version.")
    if header.type not in (ET_REL, ET_EXEC):
        raise ElfError("Unsupported ELF File type.")
    return header


def find_entry_segment(
    header: ElfHeader, program_headers: list[ProgramHeader]
) -> ProgramHeader:
    """Return the first loadable segment that holds the entry point."""
    for segment in program_headers:
        if segment.type == PT_LOAD and segment.contains(header.entry):
            return segment
    raise ElfError("Required program header not found")


def entry_segment_image(data: bytes) -> tuple[bytes, int]:
    """Build the memory image of the segment holding the entry point.

    Returns the image (memsz bytes, file contents then zeros) and the offset
    of the entry point within it.
    """
    header = parse_elf_header(data)
    segment = find_entry_segment(header, parse_program_headers(data, header))
    if segment.offset + segment.filesz > len(data):
        raise ElfError("segment contents extend past end of file")
    if segment.filesz > segment.memsz:
        raise ElfError("segment file size exceeds its memory size")
    contents = data[segment.offset : segment.offset + segment.filesz]
    image = contents + bytes(segment.memsz - segment.filesz)
    return image, header.entry - segment.vaddr
"""
Minimal ELF inspector: validates ELF identification headers and traces the
dynamic dependencies of a shared object with ldd.
"""

from os.path import exists as os_path_exists
from os.path import basename as os_path_basename

from re import compile as re_compile
from struct import unpack as struct_unpack

from subprocess import run as subprocess_run

from typing import List, Mapping, Optional

from logger.logger import Logger

# ELF identification constants
ELF_MAGIC_BYTES = b"\x7fELF"
ELF_IDENT_SIZE = 16
ELF_CLASS_32 = 1
ELF_CLASS_64 = 2
ELF_DATA_LSB = 1
ELF_DATA_MSB = 2

# e_type values, ldd can only trace ET_EXEC and ET_DYN objects
ET_REL = 1
ET_EXEC = 2
ET_DYN = 3

# ldd output formats:
#   "libname.so => /path/to/lib (0x...)"
#   "/lib64/ld-linux-x86-64.so.2 (0x...)"
#   "linux-vdso.so.1 (0x...)"
#   "libmissing.so.1 => not found"
LDD_RESOLVED_PATTERN = re_compile(r"^\s*(\S+) => (/.+) \(0x[0-9a-fA-F]+\)$")
LDD_ABSOLUTE_PATTERN = re_compile(r"^\s*(/\S+) \(0x[0-9a-fA-F]+\)$")
LDD_NOT_FOUND_PATTERN = re_compile(r"^\s*(\S+) => not found$")


class ElfFileParseError(Exception):
    """Raised when a file cannot be handled as an ELF image."""


class ElfFile:
    def __init__(
        self,
        path: str,
        environ: Optional[Mapping[str, str]] = None,
        log_level: str = "INFO",
    ):
        self.path = path
        self.environ = environ
        self.logger = Logger(log_level, self.__class__.__name__)

        self.elf_class, self.byte_order, self.elf_type = self._read_header()

    def _read_header(self):
        try:
            with open(self.path, "rb") as f:
                header = f.read(ELF_IDENT_SIZE + 2)
        except OSError as e:
            raise ElfFileParseError(f"Could not read {self.path}: {e}") from e

        if len(header) < ELF_IDENT_SIZE + 2 or header[:4] != ELF_MAGIC_BYTES:
            raise ElfFileParseError(f"Not an ELF file: {self.path}")

        elf_class = header[4]
        if elf_class not in (ELF_CLASS_32, ELF_CLASS_64):
            raise ElfFileParseError(f"Invalid ELF class {elf_class}: {self.path}")

        data = header[5]
        if data == ELF_DATA_LSB:
            byte_order = "<"
        elif data == ELF_DATA_MSB:
            byte_order = ">"
        else:
            raise ElfFileParseError(f"Invalid ELF data encoding {data}: {self.path}")

        elf_type = struct_unpack(
            byte_order + "H", header[ELF_IDENT_SIZE : ELF_IDENT_SIZE + 2]
        )[0]
        return elf_class, byte_order, elf_type

    @property
    def is_64_bit(self) -> bool:
        return self.elf_class == ELF_CLASS_64

    def trace_dynamic_dependencies(self) -> List[str]:
        """
        Return the absolute paths of all libraries the file depends on,
        including transitive dependencies, as resolved by ldd.
        """
        if self.elf_type not in (ET_EXEC, ET_DYN):
            return []

        self.logger.debug(f"Running ldd on: {self.path}")
        result = subprocess_run(
            ["ldd", self.path],
            capture_output=True,
            text=True,
            env=dict(self.environ) if self.environ is not None else None,
        )

        if result.returncode != 0:
            # "not a dynamic executable" for static binaries
            self.logger.debug(
                f"ldd failed for {os_path_basename(self.path)}: {result.stderr.strip()}"
            )
            return []

        return parse_ldd_output(result.stdout, self.logger)


def parse_ldd_output(output: str, logger: Optional[Logger] = None) -> List[str]:
    dependencies = []

    for line in output.splitlines():
        match = LDD_RESOLVED_PATTERN.match(line)
        if match:
            dependencies.append(match.group(2).strip())
            continue

        match = LDD_ABSOLUTE_PATTERN.match(line)
        if match:
            candidate_path = match.group(1)
            if os_path_exists(candidate_path):
                dependencies.append(candidate_path)
            continue

        match = LDD_NOT_FOUND_PATTERN.match(line)
        if match and logger is not None:
            logger.warning(f"Could not find dependency: {match.group(1)}")

    return dependencies

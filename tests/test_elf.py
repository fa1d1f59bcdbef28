import struct

import pytest

from qt_plugin.elf import ET_DYN, ET_REL, ElfFile, ElfFileParseError, parse_ldd_output


def write_elf_header(path, elf_class=2, data=1, elf_type=ET_DYN):
    byte_order = "<" if data == 1 else ">"
    ident = b"\x7fELF" + bytes([elf_class, data, 1]) + bytes(9)
    path.write_bytes(ident + struct.pack(byte_order + "H", elf_type) + bytes(46))
    return path


def test_non_elf_file_is_rejected(tmp_path):
    text_file = tmp_path / "libQt5Core.so.5"
    text_file.write_text("not an ELF file")

    with pytest.raises(ElfFileParseError):
        ElfFile(str(text_file))


def test_missing_file_is_rejected(tmp_path):
    with pytest.raises(ElfFileParseError):
        ElfFile(str(tmp_path / "missing.so"))


def test_invalid_class_is_rejected(tmp_path):
    path = write_elf_header(tmp_path / "lib.so", elf_class=7)

    with pytest.raises(ElfFileParseError):
        ElfFile(str(path))


def test_header_is_read(tmp_path):
    path = write_elf_header(tmp_path / "lib.so", elf_class=2, data=2)

    elf_file = ElfFile(str(path))

    assert elf_file.is_64_bit
    assert elf_file.byte_order == ">"
    assert elf_file.elf_type == ET_DYN


def test_relocatable_objects_are_not_traced(tmp_path):
    path = write_elf_header(tmp_path / "object.o", elf_type=ET_REL)

    assert ElfFile(str(path)).trace_dynamic_dependencies() == []


def test_parse_ldd_output(tmp_path):
    loader = tmp_path / "ld-linux-x86-64.so.2"
    loader.write_text("")
    output = "\n".join(
        [
            "\tlinux-vdso.so.1 (0x00007ffd5d1f2000)",
            "\tlibQt5Gui.so.5 => /opt/qt/lib/libQt5Gui.so.5 (0x00007f0a1c000000)",
            "\tlibmissing.so.1 => not found",
            f"\t{loader} (0x00007f0a1d000000)",
            f"\t{tmp_path / 'ld-missing.so.2'} (0x00007f0a1e000000)",
        ]
    )

    assert parse_ldd_output(output) == ["/opt/qt/lib/libQt5Gui.so.5", str(loader)]

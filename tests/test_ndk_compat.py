import re

import pytest

from cpufeat.filesystem import MemoryFilesystem
from cpufeat.hwcaps import Aarch64Hwcap, HardwareCapabilities
from cpufeat.ndk_compat import (
    CPU_POSSIBLE_PATH,
    CPU_PRESENT_PATH,
    AndroidCpuFamily,
    Arm64Feature,
    ArmFeature,
    CpuFeatures,
    MipsFeature,
    X86Feature,
    get_cpu_count,
    main,
    parse_cpu_list,
    parse_cpu_mask,
)


def _bits(mask):
    return {i for i in range(64) if (mask >> i) & 1}


def test_documented_flag_values():
    fs = MemoryFilesystem()
    fs.create_file("/proc/cpuinfo", "Features\t: crc32\n")
    arm64 = CpuFeatures(fs, HardwareCapabilities(), AndroidCpuFamily.ARM64)
    assert arm64.get_cpu_features() == 1 << 6
    assert arm64.get_cpu_family() == 4

    x86 = CpuFeatures(MemoryFilesystem(), HardwareCapabilities(), AndroidCpuFamily.X86)
    x86.set_cpu(1, int(X86Feature.SHA_NI))
    assert x86.get_cpu_features() == 1 << 9

    mips = CpuFeatures(MemoryFilesystem(), HardwareCapabilities(), AndroidCpuFamily.MIPS)
    mips.set_cpu(1, int(MipsFeature.MSA))
    assert mips.get_cpu_features() == 1 << 1

    arm = CpuFeatures(MemoryFilesystem(), HardwareCapabilities(), AndroidCpuFamily.ARM)
    arm.set_cpu_arm(1, int(ArmFeature.ARMV7 | ArmFeature.CRC32), 0)
    assert arm.get_cpu_features() == (1 << 0) | (1 << 16)


def test_parse_single_cpu():
    assert _bits(parse_cpu_mask("31")) == {31}


def test_parse_range():
    assert _bits(parse_cpu_mask("4-31")) == set(range(4, 32))


def test_parse_range_clipped_to_32_cpus():
    assert _bits(parse_cpu_mask("30-40")) == {30, 31}


@pytest.mark.parametrize("text", ["abc", "", "-3", "1-x", "40"])
def test_parse_invalid_entries_give_empty_mask(text):
    assert parse_cpu_mask(text) == 0


@pytest.mark.parametrize(
    "line, expected",
    [
        ("0-1,3", {0, 1, 3}),
        ("31", {31}),
        ("2,4-31,32-63", {2} | set(range(4, 32))),
    ],
)
def test_parse_cpu_list(line, expected):
    assert _bits(parse_cpu_list(line)) == expected


def test_parse_cpu_list_is_union_of_entries():
    assert parse_cpu_list("0-1,3") == parse_cpu_mask("0-1") | parse_cpu_mask("3")


def test_cpu_count_combines_present_and_possible():
    fs = MemoryFilesystem()
    fs.create_file(CPU_PRESENT_PATH, "0-3\n")
    fs.create_file(CPU_POSSIBLE_PATH, "4-5\n")
    assert get_cpu_count(fs) == len(range(0, 6))


def test_cpu_count_without_files_is_zero():
    assert get_cpu_count(MemoryFilesystem()) == 0


def test_cpu_count_ignores_line_without_newline():
    fs = MemoryFilesystem()
    fs.create_file(CPU_PRESENT_PATH, "0-3")
    assert get_cpu_count(fs) == 0


def test_cpu_count_falls_back_to_one():
    cpu = CpuFeatures(MemoryFilesystem(), HardwareCapabilities(), AndroidCpuFamily.UNKNOWN)
    assert cpu.get_cpu_count() == 1
    assert cpu.get_cpu_features() == 0


def test_cpu_count_from_sysfs():
    fs = MemoryFilesystem()
    fs.create_file(CPU_POSSIBLE_PATH, "0-1,3\n")
    cpu = CpuFeatures(fs, HardwareCapabilities(), AndroidCpuFamily.ARM64)
    assert cpu.get_cpu_count() == len({0, 1, 3})


def test_arm64_features_from_cpuinfo():
    fs = MemoryFilesystem()
    fs.create_file("/proc/cpuinfo", "Features\t: fp asimd aes evtstrm\n")
    cpu = CpuFeatures(fs, HardwareCapabilities(), AndroidCpuFamily.ARM64)
    assert cpu.get_cpu_features() == Arm64Feature.FP | Arm64Feature.ASIMD | Arm64Feature.AES


def test_arm64_features_from_hwcaps():
    hwcaps = HardwareCapabilities(hwcaps=int(Aarch64Hwcap.CRC32 | Aarch64Hwcap.SHA2))
    cpu = CpuFeatures(MemoryFilesystem(), hwcaps, AndroidCpuFamily.ARM64)
    assert cpu.get_cpu_features() == Arm64Feature.CRC32 | Arm64Feature.SHA2


def test_family_is_reported():
    cpu = CpuFeatures(MemoryFilesystem(), HardwareCapabilities(), AndroidCpuFamily.MIPS)
    assert cpu.get_cpu_family() is AndroidCpuFamily.MIPS


def test_set_cpu_before_queries():
    cpu = CpuFeatures(MemoryFilesystem(), HardwareCapabilities(), AndroidCpuFamily.X86)
    forced = int(X86Feature.SSSE3 | X86Feature.AVX)
    cpu.set_cpu(4, forced)
    assert cpu.get_cpu_count() == 4
    assert cpu.get_cpu_features() == forced


def test_set_cpu_non_positive_count_becomes_one():
    cpu = CpuFeatures(MemoryFilesystem(), HardwareCapabilities(), AndroidCpuFamily.X86)
    cpu.set_cpu(0, 0)
    assert cpu.get_cpu_count() == 1


def test_set_cpu_twice_fails():
    cpu = CpuFeatures(MemoryFilesystem(), HardwareCapabilities(), AndroidCpuFamily.X86)
    cpu.set_cpu(2, 0)
    with pytest.raises(RuntimeError):
        cpu.set_cpu(3, 0)
    assert cpu.get_cpu_count() == 2


def test_set_cpu_after_query_fails():
    cpu = CpuFeatures(MemoryFilesystem(), HardwareCapabilities(), AndroidCpuFamily.X86)
    cpu.get_cpu_features()
    with pytest.raises(RuntimeError):
        cpu.set_cpu(8, int(X86Feature.AVX2))
    assert cpu.get_cpu_features() == 0


def test_set_cpu_arm_stores_id():
    cpu = CpuFeatures(MemoryFilesystem(), HardwareCapabilities(), AndroidCpuFamily.ARM)
    forced = int(ArmFeature.ARMV7 | ArmFeature.NEON)
    cpu.set_cpu_arm(2, forced, 0x1234)
    assert cpu.get_cpu_id_arm() == 0x1234
    assert cpu.get_cpu_features() == forced
    with pytest.raises(RuntimeError):
        cpu.set_cpu_arm(2, forced, 0x4321)
    assert cpu.get_cpu_id_arm() == 0x1234


def test_main_prints_report(capsys):
    assert main([]) == 0
    out = capsys.readouterr().out
    assert re.search(r"^android_getCpuFamily\(\)=\d+$", out, re.M)
    assert re.search(r"^android_getCpuFeatures\(\)=0x[0-9a-f]{8,}$", out, re.M)
    match = re.search(r"^android_getCpuCount\(\)=(\d+)$", out, re.M)
    assert match and int(match.group(1)) >= 1
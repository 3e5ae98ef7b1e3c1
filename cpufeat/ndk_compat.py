"""Android NDK style CPU family, feature mask and CPU count queries."""

from __future__ import annotations

import argparse
import threading
from enum import IntEnum, IntFlag

from cpufeat.aarch64 import Aarch64Feature, get_aarch64_info
from cpufeat.arch import Architecture, detect_architecture
from cpufeat.filesystem import OsFilesystem
from cpufeat.hwcaps import HardwareCapabilities
from cpufeat.stack_line_reader import StackLineReader
from cpufeat.string_view import parse_positive_number

CPU_PRESENT_PATH = "/sys/devices/system/cpu/present"
CPU_POSSIBLE_PATH = "/sys/devices/system/cpu/possible"

# The CPU mask holds 32 bits, so at most 32 CPUs are counted.
_MAX_CPUS = 32


class AndroidCpuFamily(IntEnum):
    """CPU family of the current process; matches the process bitness."""

    UNKNOWN = 0
    ARM = 1
    X86 = 2
    MIPS = 3
    ARM64 = 4
    X86_64 = 5
    MIPS64 = 6
    MAX = 7


class ArmFeature(IntFlag):
    """Feature bits reported for ``AndroidCpuFamily.ARM``."""

    ARMV7 = 1 << 0
    VFPV3 = 1 << 1
    NEON = 1 << 2
    LDREX_STREX = 1 << 3
    VFPV2 = 1 << 4
    VFP_D32 = 1 << 5
    VFP_FP16 = 1 << 6
    VFP_FMA = 1 << 7
    NEON_FMA = 1 << 8
    IDIV_ARM = 1 << 9
    IDIV_THUMB2 = 1 << 10
    IWMMXT = 1 << 11
    AES = 1 << 12
    PMULL = 1 << 13
    SHA1 = 1 << 14
    SHA2 = 1 << 15
    CRC32 = 1 << 16


class Arm64Feature(IntFlag):
    """Feature bits reported for ``AndroidCpuFamily.ARM64``."""

    FP = 1 << 0
    ASIMD = 1 << 1
    AES = 1 << 2
    PMULL = 1 << 3
    SHA1 = 1 << 4
    SHA2 = 1 << 5
    CRC32 = 1 << 6


class X86Feature(IntFlag):
    """Feature bits reported for ``AndroidCpuFamily.X86`` and ``X86_64``."""

    SSSE3 = 1 << 0
    POPCNT = 1 << 1
    MOVBE = 1 << 2
    SSE4_1 = 1 << 3
    SSE4_2 = 1 << 4
    AES_NI = 1 << 5
    AVX = 1 << 6
    RDRAND = 1 << 7
    AVX2 = 1 << 8
    SHA_NI = 1 << 9


class MipsFeature(IntFlag):
    """Feature bits reported for ``AndroidCpuFamily.MIPS`` and ``MIPS64``."""

    R6 = 1 << 0
    MSA = 1 << 1


_FAMILY_BY_ARCH = {
    Architecture.ARM: AndroidCpuFamily.ARM,
    Architecture.X86_32: AndroidCpuFamily.X86,
    Architecture.MIPS64: AndroidCpuFamily.MIPS64,
    Architecture.MIPS32: AndroidCpuFamily.MIPS,
    Architecture.AARCH64: AndroidCpuFamily.ARM64,
    Architecture.X86_64: AndroidCpuFamily.X86_64,
}

_ARM64_FEATURES = {
    Aarch64Feature.FP: Arm64Feature.FP,
    Aarch64Feature.ASIMD: Arm64Feature.ASIMD,
    Aarch64Feature.AES: Arm64Feature.AES,
    Aarch64Feature.PMULL: Arm64Feature.PMULL,
    Aarch64Feature.SHA1: Arm64Feature.SHA1,
    Aarch64Feature.SHA2: Arm64Feature.SHA2,
    Aarch64Feature.CRC32: Arm64Feature.CRC32,
}


def parse_cpu_mask(text: str) -> int:
    """Return the CPU mask for one entry such as ``"31"`` or ``"4-31"``.

    Malformed entries give an empty mask; CPUs from 32 upwards are ignored.
    """
    first, sep, last = text.partition("-")
    if not sep:
        index = parse_positive_number(text)
        if index < 0 or index >= _MAX_CPUS:
            return 0
        return 1 << index
    low = parse_positive_number(first)
    high = parse_positive_number(last)
    if low < 0 or high < 0:
        return 0
    mask = 0
    for index in range(low, min(high, _MAX_CPUS - 1) + 1):
        mask |= 1 << index
    return mask


def parse_cpu_list(line: str) -> int:
    """Return the CPU mask for a list such as ``"2,4-31,32-63"`` or ``"0-1,3"``."""
    mask = 0
    for entry in line.split(","):
        if entry:
            mask |= parse_cpu_mask(entry)
    return mask


def _cpu_mask_from_file(filesystem, filename: str) -> int:
    try:
        stream = filesystem.open(filename)
    except OSError:
        return 0
    with stream:
        result = StackLineReader(stream).next_line()
    if not result.full_line or result.eof:
        return 0
    return parse_cpu_list(result.line)


def get_cpu_count(filesystem=None) -> int:
    """Count the CPUs listed as present or possible in sysfs (0 if unknown)."""
    if filesystem is None:
        filesystem = OsFilesystem()
    mask = _cpu_mask_from_file(filesystem, CPU_PRESENT_PATH)
    mask |= _cpu_mask_from_file(filesystem, CPU_POSSIBLE_PATH)
    return bin(mask).count("1")


class CpuFeatures:
    """Lazily detected CPU family, feature mask, CPU count and ARM CPU id.

    Detection runs once, on the first query. The values may instead be forced
    with :meth:`set_cpu` or :meth:`set_cpu_arm`, but only before that.
    """

    def __init__(
        self,
        filesystem=None,
        hwcaps: HardwareCapabilities | None = None,
        family: AndroidCpuFamily | None = None,
    ) -> None:
        self._filesystem = filesystem if filesystem is not None else OsFilesystem()
        self._hwcaps = hwcaps
        if family is None:
            family = _FAMILY_BY_ARCH.get(detect_architecture(), AndroidCpuFamily.UNKNOWN)
        self._family = AndroidCpuFamily(family)
        self._lock = threading.Lock()
        self._inited = False
        self._cpu_features = 0
        self._cpu_count = 1
        self._cpu_id_arm = 0

    def _detect_features(self) -> int:
        if self._family is AndroidCpuFamily.ARM64:
            info = get_aarch64_info(self._filesystem, self._hwcaps)
            mask = Arm64Feature(0)
            for feature, flag in _ARM64_FEATURES.items():
                if info.has(feature):
                    mask |= flag
            return int(mask)
        return 0

    def _ensure_initialized(self) -> None:
        with self._lock:
            if self._inited:
                return
            self._inited = True
            self._cpu_count = get_cpu_count(self._filesystem) or 1
            self._cpu_features = self._detect_features()

    def get_cpu_family(self) -> AndroidCpuFamily:
        """Return the CPU family of the process."""
        return self._family

    def get_cpu_features(self) -> int:
        """Return the feature bit mask; its meaning depends on the family."""
        self._ensure_initialized()
        return self._cpu_features

    def get_cpu_count(self) -> int:
        """Return the number of CPUs, at least 1 and at most 32."""
        self._ensure_initialized()
        return self._cpu_count

    def get_cpu_id_arm(self) -> int:
        """Return the ARM 32-bit CPUID value, 0 unless it was set."""
        self._ensure_initialized()
        return self._cpu_id_arm

    def set_cpu(self, cpu_count: int, cpu_features: int) -> None:
        """Force the CPU count and feature mask.

        Raises RuntimeError once the values were detected or already set.
        """
        with self._lock:
            if self._inited:
                raise RuntimeError("CPU information is already initialized")
            self._inited = True
            self._cpu_count = 1 if cpu_count <= 0 else cpu_count
            self._cpu_features = int(cpu_features)

    def set_cpu_arm(self, cpu_count: int, cpu_features: int, cpu_id: int) -> None:
        """Like :meth:`set_cpu`, also forcing the ARM CPUID value."""
        self.set_cpu(cpu_count, cpu_features)
        self._cpu_id_arm = int(cpu_id)


def main(argv=None) -> int:
    """Print the CPU family, feature mask and CPU count of this machine."""
    parser = argparse.ArgumentParser(
        description="Show the CPU family, feature mask and CPU count."
    )
    parser.parse_args(argv)
    cpu = CpuFeatures()
    print(f"android_getCpuFamily()={int(cpu.get_cpu_family())}")
    print(f"android_getCpuFeatures()=0x{cpu.get_cpu_features():08x}")
    print(f"android_getCpuCount()={cpu.get_cpu_count()}")
    if cpu.get_cpu_family() is AndroidCpuFamily.ARM:
        print(f"android_getCpuIdArm()=0x{cpu.get_cpu_id_arm():04x}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
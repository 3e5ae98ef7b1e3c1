"""Detection of the architecture and operating system of the running process."""

from __future__ import annotations

import platform
import struct
import sys
from enum import Enum

_X86_MACHINES = frozenset(
    {"x86_64", "amd64", "x64", "i86pc", "x86", "i386", "i486", "i586", "i686"}
)
_ARM64_MACHINES = frozenset({"aarch64", "arm64", "aarch64_be"})


class Architecture(Enum):
    """Processor architecture, matching the bitness of the current process."""

    UNKNOWN = "unknown"
    X86_32 = "x86_32"
    X86_64 = "x86_64"
    ARM = "arm"
    AARCH64 = "aarch64"
    MIPS32 = "mips32"
    MIPS64 = "mips64"
    PPC = "ppc"
    S390X = "s390x"
    RISCV32 = "riscv32"
    RISCV64 = "riscv64"
    RISCV128 = "riscv128"
    LOONGARCH = "loongarch"

    @property
    def is_x86(self) -> bool:
        return self in (Architecture.X86_32, Architecture.X86_64)

    @property
    def is_any_arm(self) -> bool:
        return self in (Architecture.ARM, Architecture.AARCH64)

    @property
    def is_mips(self) -> bool:
        return self in (Architecture.MIPS32, Architecture.MIPS64)

    @property
    def is_riscv(self) -> bool:
        return self in (
            Architecture.RISCV32,
            Architecture.RISCV64,
            Architecture.RISCV128,
        )


class OperatingSystem(Enum):
    """Operating system family."""

    UNKNOWN = "unknown"
    LINUX = "linux"
    ANDROID = "android"
    FREEBSD = "freebsd"
    WINDOWS = "windows"
    MACOS = "macos"
    IPHONE = "iphone"


def detect_architecture(machine: str | None = None, pointer_bits: int | None = None) -> Architecture:
    """Return the architecture for a machine name and process pointer width.

    ``machine`` defaults to :func:`platform.machine` and ``pointer_bits`` to the
    pointer width of the running interpreter.
    """
    if machine is None:
        machine = platform.machine()
    if pointer_bits is None:
        pointer_bits = struct.calcsize("P") * 8
    if pointer_bits <= 0:
        raise ValueError(f"pointer_bits must be positive, got {pointer_bits}")

    name = machine.strip().lower()
    wide = pointer_bits >= 64

    if name in _X86_MACHINES:
        return Architecture.X86_64 if wide else Architecture.X86_32
    if name in _ARM64_MACHINES or name.startswith("arm"):
        return Architecture.AARCH64 if wide else Architecture.ARM
    if name.startswith("mips"):
        return Architecture.MIPS64 if wide else Architecture.MIPS32
    if name.startswith(("ppc", "powerpc")):
        return Architecture.PPC
    if name == "s390x" and wide:
        return Architecture.S390X
    if name.startswith("riscv"):
        return {
            32: Architecture.RISCV32,
            64: Architecture.RISCV64,
            128: Architecture.RISCV128,
        }.get(pointer_bits, Architecture.UNKNOWN)
    if name.startswith("loongarch") and wide:
        return Architecture.LOONGARCH
    return Architecture.UNKNOWN


def detect_os(platform_name: str | None = None) -> OperatingSystem:
    """Return the operating system for a ``sys.platform`` style name."""
    if platform_name is None:
        platform_name = sys.platform
    name = platform_name.strip().lower()
    if name.startswith("freebsd"):
        return OperatingSystem.FREEBSD
    if name.startswith("android"):
        return OperatingSystem.ANDROID
    if name.startswith("linux"):
        return OperatingSystem.LINUX
    if name in ("win32", "win64", "cygwin", "msys"):
        return OperatingSystem.WINDOWS
    if name == "darwin":
        return OperatingSystem.MACOS
    if name in ("ios", "tvos", "watchos"):
        return OperatingSystem.IPHONE
    return OperatingSystem.UNKNOWN
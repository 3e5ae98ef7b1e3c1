"""Hardware capability bits from the ELF auxiliary vector."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum, IntFlag

from cpufeat.filesystem import OsFilesystem

AUXV_PATH = "/proc/self/auxv"

# Each auxv entry is read as a pair of unsigned 32-bit words (tag, value).
_AUXV_ENTRY = struct.Struct("=II")


class AuxvType(IntEnum):
    """Auxiliary vector entry types."""

    PLATFORM = 15
    HWCAP = 16
    BASE_PLATFORM = 24
    HWCAP2 = 26


@dataclass(frozen=True)
class HardwareCapabilities:
    """The AT_HWCAP and AT_HWCAP2 words."""

    hwcaps: int = 0
    hwcaps2: int = 0


class Aarch64Hwcap(IntFlag):
    FP = 1 << 0
    ASIMD = 1 << 1
    EVTSTRM = 1 << 2
    AES = 1 << 3
    PMULL = 1 << 4
    SHA1 = 1 << 5
    SHA2 = 1 << 6
    CRC32 = 1 << 7
    ATOMICS = 1 << 8
    FPHP = 1 << 9
    ASIMDHP = 1 << 10
    CPUID = 1 << 11
    ASIMDRDM = 1 << 12
    JSCVT = 1 << 13
    FCMA = 1 << 14
    LRCPC = 1 << 15
    DCPOP = 1 << 16
    SHA3 = 1 << 17
    SM3 = 1 << 18
    SM4 = 1 << 19
    ASIMDDP = 1 << 20
    SHA512 = 1 << 21
    SVE = 1 << 22
    ASIMDFHM = 1 << 23
    DIT = 1 << 24
    USCAT = 1 << 25
    ILRCPC = 1 << 26
    FLAGM = 1 << 27
    SSBS = 1 << 28
    SB = 1 << 29
    PACA = 1 << 30
    PACG = 1 << 31


class Aarch64Hwcap2(IntFlag):
    DCPODP = 1 << 0
    SVE2 = 1 << 1
    SVEAES = 1 << 2
    SVEPMULL = 1 << 3
    SVEBITPERM = 1 << 4
    SVESHA3 = 1 << 5
    SVESM4 = 1 << 6
    FLAGM2 = 1 << 7
    FRINT = 1 << 8
    SVEI8MM = 1 << 9
    SVEF32MM = 1 << 10
    SVEF64MM = 1 << 11
    SVEBF16 = 1 << 12
    I8MM = 1 << 13
    BF16 = 1 << 14
    DGH = 1 << 15
    RNG = 1 << 16
    BTI = 1 << 17
    MTE = 1 << 18
    ECV = 1 << 19
    AFP = 1 << 20
    RPRES = 1 << 21
    MTE3 = 1 << 22
    SME = 1 << 23
    SME_I16I64 = 1 << 24
    SME_F64F64 = 1 << 25
    SME_I8I32 = 1 << 26
    SME_F16F32 = 1 << 27
    SME_B16F32 = 1 << 28
    SME_F32F32 = 1 << 29
    SME_FA64 = 1 << 30
    WFXT = 1 << 31
    EBF16 = 1 << 32
    SVE_EBF16 = 1 << 33
    CSSC = 1 << 34
    RPRFM = 1 << 35
    SVE2P1 = 1 << 36
    SME2 = 1 << 37
    SME2P1 = 1 << 38
    SME_I16I32 = 1 << 39
    SME_BI32I32 = 1 << 40
    SME_B16B16 = 1 << 41
    SME_F16F16 = 1 << 42


class ArmHwcap(IntFlag):
    SWP = 1 << 0
    HALF = 1 << 1
    THUMB = 1 << 2
    BIT26 = 1 << 3
    FAST_MULT = 1 << 4
    FPA = 1 << 5
    VFP = 1 << 6
    EDSP = 1 << 7
    JAVA = 1 << 8
    IWMMXT = 1 << 9
    CRUNCH = 1 << 10
    THUMBEE = 1 << 11
    NEON = 1 << 12
    VFPV3 = 1 << 13
    VFPV3D16 = 1 << 14
    TLS = 1 << 15
    VFPV4 = 1 << 16
    IDIVA = 1 << 17
    IDIVT = 1 << 18
    VFPD32 = 1 << 19
    LPAE = 1 << 20
    EVTSTRM = 1 << 21


class ArmHwcap2(IntFlag):
    AES = 1 << 0
    PMULL = 1 << 1
    SHA1 = 1 << 2
    SHA2 = 1 << 3
    CRC32 = 1 << 4


class MipsHwcap(IntFlag):
    R6 = 1 << 0
    MSA = 1 << 1
    CRC32 = 1 << 2
    MIPS16 = 1 << 3
    MDMX = 1 << 4
    MIPS3D = 1 << 5
    SMARTMIPS = 1 << 6
    DSP = 1 << 7
    DSP2 = 1 << 8
    DSP3 = 1 << 9


class PpcFeature(IntFlag):
    """PowerPC bits found in AT_HWCAP."""

    PPC_32 = 0x80000000
    PPC_64 = 0x40000000
    INSTR_601 = 0x20000000
    HAS_ALTIVEC = 0x10000000
    HAS_FPU = 0x08000000
    HAS_MMU = 0x04000000
    HAS_4XXMAC = 0x02000000
    UNIFIED_CACHE = 0x01000000
    HAS_SPE = 0x00800000
    HAS_EFP_SINGLE = 0x00400000
    HAS_EFP_DOUBLE = 0x00200000
    NO_TB = 0x00100000
    POWER4 = 0x00080000
    POWER5 = 0x00040000
    POWER5_PLUS = 0x00020000
    CELL = 0x00010000
    BOOKE = 0x00008000
    SMT = 0x00004000
    ICACHE_SNOOP = 0x00002000
    ARCH_2_05 = 0x00001000
    PA6T = 0x00000800
    HAS_DFP = 0x00000400
    POWER6_EXT = 0x00000200
    ARCH_2_06 = 0x00000100
    HAS_VSX = 0x00000080
    PSERIES_PERFMON_COMPAT = 0x00000040
    TRUE_LE = 0x00000002
    PPC_LE = 0x00000001


class PpcFeature2(IntFlag):
    """PowerPC bits found in AT_HWCAP2."""

    ARCH_2_07 = 0x80000000
    HTM = 0x40000000
    DSCR = 0x20000000
    EBB = 0x10000000
    ISEL = 0x08000000
    TAR = 0x04000000
    VEC_CRYPTO = 0x02000000
    HTM_NOSC = 0x01000000
    ARCH_3_00 = 0x00800000
    HAS_IEEE128 = 0x00400000
    DARN = 0x00200000
    SCV = 0x00100000
    HTM_NO_SUSPEND = 0x00080000


class S390Hwcap(IntFlag):
    ESAN3 = 1
    ZARCH = 2
    STFLE = 4
    MSA = 8
    LDISP = 16
    EIMM = 32
    DFP = 64
    HPAGE = 128
    ETF3EH = 256
    HIGH_GPRS = 512
    TE = 1024
    VX = 2048
    VXRS = 2048
    VXD = 4096
    VXRS_BCD = 4096
    VXE = 8192
    VXRS_EXT = 8192
    GS = 16384
    VXRS_EXT2 = 32768
    VXRS_PDE = 65536
    SORT = 131072
    DFLT = 262144
    VXRS_PDE2 = 524288
    NNPA = 1048576
    PCI_MIO = 2097152
    SIE = 4194304


# Register-width markers; these are not single-bit flags.
RISCV_HWCAP_32 = 0x32
RISCV_HWCAP_64 = 0x64
RISCV_HWCAP_128 = 0x128


def _riscv_letter(letter: str) -> int:
    return 1 << (ord(letter) - ord("A"))


class RiscvHwcap(IntFlag):
    """RISC-V single-letter extension bits."""

    A = _riscv_letter("A")
    C = _riscv_letter("C")
    D = _riscv_letter("D")
    F = _riscv_letter("F")
    M = _riscv_letter("M")
    Q = _riscv_letter("Q")
    V = _riscv_letter("V")


class LoongarchHwcap(IntFlag):
    CPUCFG = 1 << 0
    LAM = 1 << 1
    UAL = 1 << 2
    FPU = 1 << 3
    LSX = 1 << 4
    LASX = 1 << 5
    CRC32 = 1 << 6
    COMPLEX = 1 << 7
    CRYPTO = 1 << 8
    LVZ = 1 << 9
    LBT_X86 = 1 << 10
    LBT_ARM = 1 << 11
    LBT_MIPS = 1 << 12
    PTW = 1 << 13


def _is_set(mask: int, value: int) -> bool:
    if mask == 0:
        return False
    return (value & mask) == mask


def is_hwcaps_set(hwcaps_mask: HardwareCapabilities, hwcaps: HardwareCapabilities) -> bool:
    """Return whether all bits of a non-zero mask word are present in ``hwcaps``.

    The check passes when either the AT_HWCAP or the AT_HWCAP2 mask matches.
    """
    return _is_set(hwcaps_mask.hwcaps, hwcaps.hwcaps) or _is_set(
        hwcaps_mask.hwcaps2, hwcaps.hwcaps2
    )


def read_auxv_value(filesystem, hwcap_type: int) -> int:
    """Return the value stored for ``hwcap_type`` in the auxiliary vector file.

    Returns 0 if the file cannot be read or holds no such entry.
    """
    if filesystem is None:
        filesystem = OsFilesystem()
    try:
        stream = filesystem.open(AUXV_PATH)
    except OSError:
        return 0
    with stream:
        while True:
            try:
                chunk = stream.read(_AUXV_ENTRY.size)
            except OSError:
                return 0
            if len(chunk) < _AUXV_ENTRY.size:
                return 0
            tag, value = _AUXV_ENTRY.unpack(chunk)
            if tag == 0 and value == 0:
                return 0
            if tag == hwcap_type:
                return value


def get_hardware_capabilities(filesystem=None) -> HardwareCapabilities:
    """Read the AT_HWCAP and AT_HWCAP2 words of the current process."""
    return HardwareCapabilities(
        hwcaps=read_auxv_value(filesystem, AuxvType.HWCAP),
        hwcaps2=read_auxv_value(filesystem, AuxvType.HWCAP2),
    )
"""AArch64 feature detection from /proc/cpuinfo and hardware capabilities."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

from cpufeat.hwcaps import (
    Aarch64Hwcap,
    Aarch64Hwcap2,
    HardwareCapabilities,
    get_hardware_capabilities,
    is_hwcaps_set,
)
from cpufeat.stack_line_reader import StackLineReader
from cpufeat.string_view import get_attribute_key_value, has_word, parse_positive_number

CPUINFO_PATH = "/proc/cpuinfo"


class Aarch64Feature(Enum):
    """AArch64 features; the value is the flag name used in /proc/cpuinfo."""

    FP = "fp"
    ASIMD = "asimd"
    EVTSTRM = "evtstrm"
    AES = "aes"
    PMULL = "pmull"
    SHA1 = "sha1"
    SHA2 = "sha2"
    CRC32 = "crc32"
    ATOMICS = "atomics"
    FPHP = "fphp"
    ASIMDHP = "asimdhp"
    CPUID = "cpuid"
    ASIMDRDM = "asimdrdm"
    JSCVT = "jscvt"
    FCMA = "fcma"
    LRCPC = "lrcpc"
    DCPOP = "dcpop"
    SHA3 = "sha3"
    SM3 = "sm3"
    SM4 = "sm4"
    ASIMDDP = "asimddp"
    SHA512 = "sha512"
    SVE = "sve"
    ASIMDFHM = "asimdfhm"
    DIT = "dit"
    USCAT = "uscat"
    ILRCPC = "ilrcpc"
    FLAGM = "flagm"
    SSBS = "ssbs"
    SB = "sb"
    PACA = "paca"
    PACG = "pacg"
    DCPODP = "dcpodp"
    SVE2 = "sve2"
    SVEAES = "sveaes"
    SVEPMULL = "svepmull"
    SVEBITPERM = "svebitperm"
    SVESHA3 = "svesha3"
    SVESM4 = "svesm4"
    FLAGM2 = "flagm2"
    FRINT = "frint"
    SVEI8MM = "svei8mm"
    SVEF32MM = "svef32mm"
    SVEF64MM = "svef64mm"
    SVEBF16 = "svebf16"
    I8MM = "i8mm"
    BF16 = "bf16"
    DGH = "dgh"
    RNG = "rng"
    BTI = "bti"
    MTE = "mte"
    ECV = "ecv"
    AFP = "afp"
    RPRES = "rpres"
    MTE3 = "mte3"
    SME = "sme"
    SME_I16I64 = "smei16i64"
    SME_F64F64 = "smef64f64"
    SME_I8I32 = "smei8i32"
    SME_F16F32 = "smef16f32"
    SME_B16F32 = "smeb16f32"
    SME_F32F32 = "smef32f32"
    SME_FA64 = "smefa64"
    WFXT = "wfxt"
    EBF16 = "ebf16"
    SVE_EBF16 = "sveebf16"
    CSSC = "cssc"
    RPRFM = "rprfm"
    SVE2P1 = "sve2p1"
    SME2 = "sme2"
    SME2P1 = "sme2p1"
    SME_I16I32 = "smei16i32"
    SME_BI32I32 = "smebi32i32"
    SME_B16B16 = "smeb16b16"
    SME_F16F16 = "smef16f16"

    @property
    def hwcaps(self) -> HardwareCapabilities:
        """The AT_HWCAP / AT_HWCAP2 bit that announces this feature."""
        return _HWCAP_MASKS[self]


def _hwcap_mask(feature: Aarch64Feature) -> HardwareCapabilities:
    if feature.name in Aarch64Hwcap.__members__:
        return HardwareCapabilities(hwcaps=int(Aarch64Hwcap[feature.name]))
    return HardwareCapabilities(hwcaps2=int(Aarch64Hwcap2[feature.name]))


_HWCAP_MASKS = {feature: _hwcap_mask(feature) for feature in Aarch64Feature}


@dataclass
class Aarch64Info:
    """Features and identification fields of an AArch64 processor.

    Numeric fields hold -1 when the value present could not be parsed.
    """

    features: set[Aarch64Feature] = field(default_factory=set)
    implementer: int = 0
    variant: int = 0
    part: int = 0
    revision: int = 0

    def has(self, feature: Aarch64Feature) -> bool:
        """Return whether ``feature`` is available."""
        return feature in self.features


_NUMERIC_KEYS = {
    "CPU implementer": "implementer",
    "CPU variant": "variant",
    "CPU part": "part",
    "CPU revision": "revision",
}


def parse_cpuinfo(lines: Iterable[str]) -> Aarch64Info:
    """Build an :class:`Aarch64Info` from the lines of /proc/cpuinfo.

    Each ``Features`` line replaces the features seen before it.
    """
    info = Aarch64Info()
    for line in lines:
        pair = get_attribute_key_value(line)
        if pair is None:
            continue
        key, value = pair
        if key == "Features":
            info.features = {
                feature for feature in Aarch64Feature if has_word(value, feature.value, " ")
            }
        elif key in _NUMERIC_KEYS:
            setattr(info, _NUMERIC_KEYS[key], parse_positive_number(value))
    return info


def _read_cpuinfo(filesystem) -> Aarch64Info:
    try:
        stream = filesystem.open(CPUINFO_PATH)
    except OSError:
        return Aarch64Info()
    with stream:
        return parse_cpuinfo(result.line for result in StackLineReader(stream))


def get_aarch64_info(filesystem=None, hwcaps: HardwareCapabilities | None = None) -> Aarch64Info:
    """Combine /proc/cpuinfo with the hardware capabilities of the process.

    Features announced by either source are reported, so some information is
    available even when /proc/cpuinfo cannot be read.
    """
    if filesystem is None:
        from cpufeat.filesystem import OsFilesystem

        filesystem = OsFilesystem()
    info = _read_cpuinfo(filesystem)
    if hwcaps is None:
        hwcaps = get_hardware_capabilities(filesystem)
    info.features |= {
        feature for feature in Aarch64Feature if is_hwcaps_set(feature.hwcaps, hwcaps)
    }
    return info
# cpufeat

`cpufeat` finds out which optional instructions and extensions the CPU it
runs on supports. It reads `/proc/cpuinfo`, the ELF auxiliary vector
(`/proc/self/auxv`) and the sysfs CPU lists
(`/sys/devices/system/cpu/present` and `/sys/devices/system/cpu/possible`).
It needs nothing beyond the Python standard library.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Command line

```
cpufeat-ndk
```

The same command can be started with `python -m cpufeat.ndk_compat`. It
prints three lines: the CPU family number, the feature bitmask in hexadecimal
and the CPU count. When the family is 32-bit ARM it prints a fourth line with
the ARM CPUID. The line names follow the Android NDK `cpu-features`
interface, for example:

```
android_getCpuFamily()=4
android_getCpuFeatures()=0x0000007f
android_getCpuCount()=8
```

## Library use

### AArch64 features

```python
from cpufeat.aarch64 import Aarch64Feature, get_aarch64_info
from cpufeat.filesystem import OsFilesystem
from cpufeat.hwcaps import get_hardware_capabilities

fs = OsFilesystem()
info = get_aarch64_info(fs, get_hardware_capabilities(fs))
if info.has(Aarch64Feature.SVE):
    ...
```

`get_aarch64_info` reports a feature if either `/proc/cpuinfo` lists it on its
`Features` line or the AT_HWCAP / AT_HWCAP2 words announce it. Both arguments
are optional: by default the real filesystem is used and the capabilities are
read from `/proc/self/auxv`. `Aarch64Info` also carries `implementer`,
`variant`, `part` and `revision`, taken from the `CPU implementer`,
`CPU variant`, `CPU part` and `CPU revision` lines; a value that cannot be
parsed is stored as -1.

`parse_cpuinfo(lines)` builds an `Aarch64Info` from any iterable of
`/proc/cpuinfo` lines, without looking at hardware capabilities.

### Android NDK style interface

```python
from cpufeat.ndk_compat import CpuFeatures

cpu = CpuFeatures()
print(cpu.get_cpu_family(), hex(cpu.get_cpu_features()), cpu.get_cpu_count())
```

`CpuFeatures` detects its values once, on the first query. The family comes
from `cpufeat.arch.detect_architecture()` unless given as `family`. The CPU
count is at least 1 and at most 32.

`set_cpu(cpu_count, cpu_features)` and
`set_cpu_arm(cpu_count, cpu_features, cpu_id)` force the values, for
processes that cannot read `/proc`. They must be called before any query;
once the values were detected or set, they raise `RuntimeError`.

The feature bits are described by `ArmFeature`, `Arm64Feature`, `X86Feature`
and `MipsFeature`, and the families by `AndroidCpuFamily`.

### Counting CPUs

`parse_cpu_mask("4-31")` and `parse_cpu_list("0-1,3")` turn sysfs CPU lists
into bit masks (CPUs from 32 upwards are ignored). `get_cpu_count(filesystem)`
counts the CPUs named in the present and possible files; it returns 0 when
neither can be read. The line must end with a newline to be counted.

### Testing without real hardware

`MemoryFilesystem` stands in for the disk, so the parsers can run on
recorded data:

```python
from cpufeat.filesystem import MemoryFilesystem
from cpufeat.ndk_compat import get_cpu_count

fs = MemoryFilesystem()
fs.create_file("/sys/devices/system/cpu/present", "0-3\n")
assert get_cpu_count(fs) == 4
```

Hardware capabilities can be passed in directly as a
`cpufeat.hwcaps.HardwareCapabilities(hwcaps=..., hwcaps2=...)`.

### Helpers

- `cpufeat.string_view`: small parsing helpers such as
  `get_attribute_key_value`, `has_word`, `trim_whitespace` and
  `parse_positive_number` (decimal or `0x` hexadecimal, -1 on failure).
- `cpufeat.stack_line_reader.StackLineReader`: reads lines from a binary
  stream into a buffer of fixed size (1024 bytes by default); a longer line
  is cut and reported with `full_line=False`.
- `cpufeat.bit_utils`: `is_bit_set` and `extract_bit_range`.
- `cpufeat.hwcaps`: the kernel's hwcap bit constants for AArch64, ARM, MIPS,
  PowerPC, s390, RISC-V and LoongArch, plus `is_hwcaps_set`,
  `read_auxv_value` and `get_hardware_capabilities`.
- `cpufeat.arch`: `detect_architecture(machine, pointer_bits)` and
  `detect_os(platform_name)`.

## What it does not do

- Feature detection is implemented for AArch64 only. For the other families
  `CpuFeatures.get_cpu_features()` returns 0 unless the mask was set with
  `set_cpu`, and `get_cpu_id_arm()` returns 0 unless it was set with
  `set_cpu_arm`.
- There is no x86 CPUID query and no parsing of `/proc/cpuinfo` for ARM,
  MIPS, PowerPC, s390, RISC-V or LoongArch; for those architectures the
  package offers the hwcap bit constants only.
- Hardware capabilities are read from `/proc/self/auxv` alone, as pairs of
  32-bit words; there is no other way of obtaining them.
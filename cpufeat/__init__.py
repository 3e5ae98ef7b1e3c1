"""Detect CPU features from cpuinfo, the auxiliary vector and sysfs CPU lists."""

__version__ = "0.1.0"
__all__ = [
    "aarch64",
    "arch",
    "bit_utils",
    "filesystem",
    "hwcaps",
    "ndk_compat",
    "stack_line_reader",
    "string_view",
]
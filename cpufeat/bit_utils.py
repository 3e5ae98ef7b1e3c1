"""Bit manipulation helpers for register values."""


def is_bit_set(reg: int, bit: int) -> bool:
    """Return whether bit number ``bit`` of ``reg`` is set."""
    return bool((reg >> bit) & 1)


def extract_bit_range(reg: int, msb: int, lsb: int) -> int:
    """Return bits ``msb`` down to ``lsb`` (inclusive) of ``reg``."""
    if msb < lsb:
        raise ValueError(f"msb ({msb}) must not be lower than lsb ({lsb})")
    mask = (1 << (msb - lsb + 1)) - 1
    return (reg >> lsb) & mask
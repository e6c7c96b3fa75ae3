"""
RV32I Emulator — Word-Addressed Data Memory

2048 slots, each a signed 32-bit word. Addresses are slot indices, not
byte offsets: `lw x6, 1(x0)` reads slot 1, the second word.

Byte and half-word stores replace only the low 8/16 bits of a slot and
keep the rest (see alu.merge_low). Byte and half-word loads truncate the
slot and extend in the emulator, so the memory itself only ever deals in
whole words.

Out-of-range slots raise MemoryAccessFault. There is no wrapping or
clamping.
"""

from typing import List, Tuple

from .alu import to_signed32, merge_low
from .errors import MemoryAccessFault

MEMORY_WORDS = 2048


class Memory:
    """Fixed-size array of signed 32-bit words."""

    def __init__(self, size: int = MEMORY_WORDS):
        self.size = size
        self._words: List[int] = [0] * size

    def check(self, addr: int) -> int:
        """Validate a slot index, returning it unchanged."""
        if not 0 <= addr < self.size:
            raise MemoryAccessFault(f"memory slot {addr} out of range")
        return addr

    # --- Core read/write ---

    def read_word(self, addr: int) -> int:
        return self._words[self.check(addr)]

    def write_word(self, addr: int, value: int):
        self._words[self.check(addr)] = to_signed32(value)

    def write_low(self, addr: int, value: int, bits: int):
        """Replace the low `bits` bits of a slot, keeping the high bits."""
        self.check(addr)
        self._words[addr] = merge_low(self._words[addr], value, bits)

    # --- Bulk access ---

    def window(self, start: int, count: int) -> List[Tuple[int, int]]:
        """(addr, value) pairs for a range of slots."""
        self.check(start)
        if count > 0:
            self.check(start + count - 1)
        return [(addr, self._words[addr]) for addr in range(start, start + count)]

    def snapshot(self) -> List[int]:
        """Copy of every slot, independent of later writes."""
        return list(self._words)

    def reset(self):
        self._words = [0] * self.size

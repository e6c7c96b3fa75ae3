"""
RV32I Emulator — Register File + Program Counter

Register model:
  x0..x31  signed 32-bit general-purpose registers
  pc       unsigned byte offset of the next instruction; pc // 4 indexes
           the program. Wraps modulo 2**32.

x0 is conventionally zero. Whether writes to it are discarded is a
machine-profile switch (hardwire_zero); the reference profile keeps them.

Out-of-range register numbers raise RegisterAccessFault. Negative
numbers are rejected too rather than wrapping Python-style.
"""

from typing import List

from .alu import to_signed32
from .errors import RegisterAccessFault

REGISTER_COUNT = 32
INSTRUCTION_BYTES = 4
PC_MASK = 0xFFFFFFFF


class Registers:
    """General-purpose registers and program counter."""

    __slots__ = ('_x', '_pc', 'hardwire_zero')

    def __init__(self, hardwire_zero: bool = False):
        self._x: List[int] = [0] * REGISTER_COUNT
        self._pc: int = 0
        self.hardwire_zero = hardwire_zero

    # --- Program counter ---

    @property
    def pc(self) -> int:
        return self._pc

    @pc.setter
    def pc(self, value: int):
        self._pc = value & PC_MASK

    def advance(self):
        """Default post-step advance to the next instruction slot."""
        self.pc = self._pc + INSTRUCTION_BYTES

    # --- General-purpose registers ---

    def check(self, index: int) -> int:
        """Validate a register number, returning it unchanged."""
        if not 0 <= index < REGISTER_COUNT:
            raise RegisterAccessFault(f"register x{index} out of range")
        return index

    def read(self, index: int) -> int:
        return self._x[self.check(index)]

    def write(self, index: int, value: int):
        self.check(index)
        if index == 0 and self.hardwire_zero:
            return
        self._x[index] = to_signed32(value)

    def __getitem__(self, index: int) -> int:
        return self.read(index)

    def __setitem__(self, index: int, value: int):
        self.write(index, value)

    def snapshot(self) -> List[int]:
        """Copy of x0..x31, independent of later writes."""
        return list(self._x)

    # --- Display ---

    def display(self) -> str:
        """Format pc and every non-zero register for trace output."""
        parts = [f"pc=0x{self._pc:08X}"]
        parts.extend(f"x{i}={v}" for i, v in enumerate(self._x) if v)
        return ' '.join(parts)

    def reset(self):
        self._x = [0] * REGISTER_COUNT
        self._pc = 0

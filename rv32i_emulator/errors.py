"""
Error taxonomy for the RV32I text-encoding emulator.

Every failure a step can produce is a CpuError subclass, so callers can
catch the whole family or tell the cases apart:

  DecodeError          structural problems with one instruction string
    FormatError          length != 32
    OpcodeError          opcode field not recognised
    FunctError           opcode known, (funct3, funct7) not recognised
    RdError / Rs1Error / Rs2Error / ImmError
                         non-binary character in that subfield
  ExecutionError       problems found while running
    ProgramCounterOutOfBounds   pc // 4 is past the last instruction
    UnsupportedInstruction      decoded fine, but no handler exists
  MachineFault         index outside the register file or memory

None of these are retried. The engine guarantees state is untouched when
any of them is raised.
"""

from typing import Optional

__all__ = [
    'CpuError', 'DecodeError', 'FormatError', 'OpcodeError', 'FunctError',
    'RdError', 'Rs1Error', 'Rs2Error', 'ImmError',
    'ExecutionError', 'ProgramCounterOutOfBounds', 'UnsupportedInstruction',
    'MachineFault', 'MemoryAccessFault', 'RegisterAccessFault',
]


class CpuError(Exception):
    """Base class for every emulator error."""

    default_message = "cpu error"

    def __init__(self, message: Optional[str] = None, pc: Optional[int] = None):
        self.message = message or self.default_message
        self.pc = pc
        super().__init__(self._format())

    def _format(self) -> str:
        if self.pc is None:
            return self.message
        return f"pc=0x{self.pc:08X}: {self.message}"

    def with_pc(self, pc: int) -> 'CpuError':
        """Attach the program counter the error occurred at."""
        self.pc = pc
        self.args = (self._format(),)
        return self


# ── Decode-time ──

class DecodeError(CpuError):
    default_message = "invalid instruction"


class FormatError(DecodeError):
    default_message = "invalid format"


class OpcodeError(DecodeError):
    default_message = "invalid opcode"


class FunctError(DecodeError):
    default_message = "invalid function"


class RdError(DecodeError):
    default_message = "invalid destination register"


class Rs1Error(DecodeError):
    default_message = "invalid supply register 1"


class Rs2Error(DecodeError):
    default_message = "invalid supply register 2"


class ImmError(DecodeError):
    default_message = "invalid immediate"


# ── Run-time ──

class ExecutionError(CpuError):
    default_message = "execution error"


class ProgramCounterOutOfBounds(ExecutionError):
    default_message = "program counter out of bounds"


class UnsupportedInstruction(ExecutionError):
    default_message = "instruction not supported"


# ── Faults ──

class MachineFault(CpuError):
    default_message = "machine fault"


class MemoryAccessFault(MachineFault):
    """Memory slot index outside [0, MEMORY_WORDS)."""
    default_message = "memory access out of range"


class RegisterAccessFault(MachineFault):
    """Register number outside [0, REGISTER_COUNT)."""
    default_message = "register access out of range"

"""
Machine profiles — named switch sets for the emulator.

'reference' is the default and keeps the literal text-encoding semantics,
quirks included:
  - immediates are plain base-2 magnitudes (no sign extension), so
    negative branch/jump/store offsets become large positive ones
  - x0 accepts writes
  - JALR jumps to the value of register number (rs1 + imm)

'rv32i' follows the documented base ISA for those three points instead.
Everything else (word-addressed memory, 2048 slots, 32 registers) is
identical between profiles.
"""

from typing import Any, Dict

JALR_REGISTER_NUMBER = "register-number"
JALR_REGISTER_VALUE = "register-value"

DEFAULT_PROFILE = "reference"

MACHINE_PROFILES: Dict[str, Dict[str, Any]] = {
    "reference": {
        "sign_extend_immediates": False,
        "hardwire_zero": False,
        "jalr_target": JALR_REGISTER_NUMBER,
        "description": "Bit-exact reference behaviour (unsigned immediates)",
    },
    "rv32i": {
        "sign_extend_immediates": True,
        "hardwire_zero": True,
        "jalr_target": JALR_REGISTER_VALUE,
        "description": "RV32I base-ISA semantics (sign-extended immediates, x0 = 0)",
    },
}


def get_profile(name: str) -> Dict[str, Any]:
    """Look up a profile by name."""
    try:
        return MACHINE_PROFILES[name]
    except KeyError:
        raise KeyError(
            f"Unknown machine profile '{name}' "
            f"(choose from: {', '.join(MACHINE_PROFILES)})") from None

"""
Program loader — instruction text files into a list of strings.

A program file is any whitespace-separated sequence of 32-character
binary tokens, one per instruction slot. Tokens are not validated here;
a malformed one surfaces as a DecodeError when the emulator reaches it.
"""

from pathlib import Path
from typing import List, Union


def parse_program(text: str) -> List[str]:
    return text.split()


def load_program(path: Union[str, Path]) -> List[str]:
    """Read a program file and split it into instruction strings."""
    return parse_program(Path(path).read_text(encoding="utf-8"))

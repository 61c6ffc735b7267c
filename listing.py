"""
The textual listing: one instruction per line, a mnemonic optionally
followed by a single space and a decimal operand, e.g.

    Push 5
    Label -3
    OutN
    End
"""
import re

from ws_types import Op, Instr, MAX_NUMBER_BITS
from ws_errors import ListingError

_MNEMONICS = {op.value: op for op in Op}
_NUMBER = re.compile(r'[+-]?[0-9]+')


def format_instr(instr: Instr) -> str:
    return str(instr)


def format_listing(instructions) -> str:
    return ''.join(f"{format_instr(i)}\n" for i in instructions)


def parse_line(line: str, lineno=None) -> Instr:
    mnemonic, _, operand = line.strip().partition(' ')
    op = _MNEMONICS.get(mnemonic)
    if op is None:
        raise ListingError(f"Unknown mnemonic '{mnemonic}'", lineno)

    if not op.takes_arg:
        if operand:
            raise ListingError(f"'{mnemonic}' takes no operand, got '{operand}'", lineno)
        return Instr(op)

    if not operand:
        raise ListingError(f"'{mnemonic}' requires an operand", lineno)
    if not _NUMBER.fullmatch(operand):
        raise ListingError(f"Invalid operand for '{mnemonic}': '{operand}'", lineno)
    value = int(operand)
    if abs(value).bit_length() > MAX_NUMBER_BITS:
        raise ListingError(f"Operand for '{mnemonic}' is larger than {MAX_NUMBER_BITS} bits: {operand}", lineno)
    return Instr(op, value)


def parse_listing(text: str):
    """Parses a whole listing. Blank lines are ignored."""
    return [parse_line(line, lineno)
            for lineno, line in enumerate(text.splitlines(), start=1)
            if line.strip()]

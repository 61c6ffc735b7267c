"""Turns instructions back into whitespace source, the inverse of decoder."""

from decoder import ROOT
from ws_types import Symbol, Op, MAX_NUMBER_BITS
from ws_errors import NumberTooLarge

SPACE, TAB, LF = (s.value.decode('ascii') for s in (Symbol.SPACE, Symbol.TAB, Symbol.LF))


def _paths(node, prefix=""):
    for symbol, step in node.branches.items():
        path = prefix + symbol.value.decode('ascii')
        if isinstance(step, Op):
            yield step, path
        else:
            yield from _paths(step, path)

# Op -> the symbols that select it in the prefix tree.
OP_PATHS = dict(_paths(ROOT))


def encode_number(n: int) -> str:
    if n.bit_length() > MAX_NUMBER_BITS:
        raise NumberTooLarge(MAX_NUMBER_BITS)
    sign = TAB if n < 0 else SPACE
    bits = format(abs(n), 'b') if n else ''
    return sign + bits.replace('0', SPACE).replace('1', TAB) + LF


def encode_instr(instr) -> str:
    code = OP_PATHS[instr.op]
    if instr.op.takes_arg:
        code += encode_number(instr.arg)
    return code


def encode_program(instructions) -> str:
    return ''.join(encode_instr(i) for i in instructions)

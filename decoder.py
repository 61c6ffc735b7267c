import sys
from collections import namedtuple

from lexer import Lexer
from ws_types import Symbol, Op, Instr, MAX_NUMBER_BITS
from ws_errors import *

S, T, L = Symbol.SPACE, Symbol.TAB, Symbol.LF

# ===================================================================
#      GRAMMAR: the instruction prefix tree
# ===================================================================

# A node maps the next Symbol either to an Op (a leaf) or to another Node.
# A symbol missing from `branches` is invalid at that point and raises the
# node's `error`.
Node = namedtuple("Node", "branches error")

STACK = Node({
    S: Op.PUSH,
    L: Node({S: Op.COPY, T: Op.SWAP, L: Op.POP}, None),
}, InvalidStackOperand)

ARITHMETIC = Node({
    S: Node({S: Op.ADD, T: Op.SUB, L: Op.MULT}, None),
    T: Node({S: Op.DIV, T: Op.MOD}, InvalidDivModOperand),
}, InvalidArithmeticOperand)

HEAP = Node({S: Op.STORE, T: Op.LOAD}, InvalidHeapOperand)

IO = Node({
    S: Node({S: Op.OUTC, T: Op.OUTN}, InvalidOutputOperand),
    T: Node({S: Op.READC, T: Op.READN}, InvalidInputOperand),
}, InvalidIOOperand)

FLOW = Node({
    S: Node({S: Op.LABEL, T: Op.CALL, L: Op.JUMP}, None),
    T: Node({S: Op.JZ, T: Op.JN, L: Op.RET}, None),
    L: Node({L: Op.END}, InvalidEndOperand),
}, None)

ROOT = Node({
    S: STACK,
    T: Node({S: ARITHMETIC, T: HEAP, L: IO}, None),
    L: FLOW,
}, None)


class Decoder:
    """
    Decodes whitespace source into Instrs, one instruction at a time.
    Decoding is complete once End has been produced; anything but
    comments after that is an error.
    """
    def __init__(self, lexer: Lexer, debug=False, log=None):
        self.lexer = lexer
        self.done = False
        self.debug = debug
        self.log = log or sys.stderr

    def __iter__(self):
        while (instr := self.next_instruction()) is not None:
            yield instr

    def decode(self):
        """Decodes the whole stream and returns the list of instructions."""
        return list(self)

    def next_instruction(self):
        """
        Returns the next Instr, or None once the stream ends cleanly after
        End.
        """
        first = self.lexer.next_symbol(allow_end=True)
        if first is None:
            if not self.done:
                raise UnterminatedProgram(self.lexer.offset)
            return None
        if self.done:
            raise InstructionsAfterEnd(self.lexer.offset)

        op = self._walk(ROOT, first)
        instr = Instr(op, self.parse_number() if op.takes_arg else None)
        if op is Op.END:
            self.done = True
        if self.debug:
            print(f"Finished Instruction: {instr}", file=self.log)
        return instr

    def _walk(self, node: Node, symbol: Symbol) -> Op:
        while True:
            step = node.branches.get(symbol)
            if step is None:
                raise node.error(symbol, self.lexer.offset)
            if isinstance(step, Op):
                return step
            node = step
            symbol = self.lexer.next_symbol()

    def parse_number(self) -> int:
        """
        Reads a sign ([Space] positive, [Tab] negative) and then binary
        digits, most significant first ([Space]=0, [Tab]=1), up to [LF].
        """
        sign = self.lexer.next_symbol()
        if sign is L:
            raise InvalidSign(sign, self.lexer.offset)

        value = 0
        bits = 0
        while (symbol := self.lexer.next_symbol()) is not L:
            bits += 1
            if bits > MAX_NUMBER_BITS:
                raise NumberTooLarge(MAX_NUMBER_BITS, self.lexer.offset)
            value = (value << 1) | (1 if symbol is T else 0)
        return -value if sign is T else value


def decode(source, debug=False, trace=False, log=None):
    """Decodes `source` (bytes, str or a binary stream) into a list of Instrs."""
    lexer = Lexer(source, trace=trace, log=log)
    return Decoder(lexer, debug=debug, log=log).decode()

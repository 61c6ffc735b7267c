from collections import namedtuple
from enum import Enum


class Symbol(Enum):
    """One letter of the ternary alphabet. The value is the source byte."""
    SPACE = b' '
    TAB = b'\t'
    LF = b'\n'

    def __str__(self):
        return {'SPACE': '[Space]', 'TAB': '[Tab]', 'LF': '[LF]'}[self.name]


class Op(Enum):
    """The closed instruction set. Values are the listing mnemonics."""
    PUSH = "Push"
    COPY = "Copy"
    SWAP = "Swap"
    POP = "Pop"
    ADD = "Add"
    SUB = "Sub"
    MULT = "Mult"
    DIV = "Div"
    MOD = "Mod"
    STORE = "St"
    LOAD = "Ld"
    OUTC = "OutC"
    OUTN = "OutN"
    READC = "ReadC"
    READN = "ReadN"
    LABEL = "Label"
    CALL = "Call"
    JUMP = "Jump"
    JZ = "Jz"
    JN = "Jn"
    RET = "Ret"
    END = "End"

    @property
    def takes_arg(self):
        return self in ARG_OPS


ARG_OPS = frozenset([Op.PUSH, Op.LABEL, Op.CALL, Op.JUMP, Op.JZ, Op.JN])

# Magnitudes of numeric literals are limited to this many bits.
MAX_NUMBER_BITS = 31


_InstrTuple = namedtuple("Instr", "op arg")
class Instr(_InstrTuple):
    """A single decoded instruction. `arg` is None unless the op takes one.
    str() gives the listing line, e.g. 'Push 5' or 'Ret'.
    """
    def __new__(cls, op: Op, arg=None):
        return super().__new__(cls, op, arg)

    def __str__(self):
        if self.arg is None:
            return self.op.value
        return f"{self.op.value} {self.arg}"

    def __repr__(self):
        return f"<{self}>"


# `instructions` never contains Label entries; `labels` maps a label
# number to an index into `instructions`.
Program = namedtuple("Program", "instructions labels")


# Shorthands, mostly for building programs in code and tests.
def Push(n): return Instr(Op.PUSH, n)
def Label(n): return Instr(Op.LABEL, n)
def Call(n): return Instr(Op.CALL, n)
def Jump(n): return Instr(Op.JUMP, n)
def Jz(n): return Instr(Op.JZ, n)
def Jn(n): return Instr(Op.JN, n)

Copy = Instr(Op.COPY)
Swap = Instr(Op.SWAP)
Pop = Instr(Op.POP)
Add = Instr(Op.ADD)
Sub = Instr(Op.SUB)
Mult = Instr(Op.MULT)
Div = Instr(Op.DIV)
Mod = Instr(Op.MOD)
Store = Instr(Op.STORE)
Load = Instr(Op.LOAD)
OutC = Instr(Op.OUTC)
OutN = Instr(Op.OUTN)
ReadC = Instr(Op.READC)
ReadN = Instr(Op.READN)
Ret = Instr(Op.RET)
End = Instr(Op.END)

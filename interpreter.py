import operator
import re
import sys

from ws_types import Op, Program
from ws_errors import *

# ===================================================================
#      INTERPRETER: Runs a loaded program one instruction per step
# ===================================================================

_NUMBER = re.compile(r'[+-]?[0-9]+')


def trunc_div(a: int, b: int) -> int:
    """Integer division rounding toward zero (Python's // floors)."""
    if b == 0:
        raise DivisionByZero()
    q = abs(a) // abs(b)
    return -q if (a < 0) != (b < 0) else q


def trunc_mod(a: int, b: int) -> int:
    """Remainder matching trunc_div; takes the sign of the dividend."""
    return a - b * trunc_div(a, b)


class Interpreter:
    """
    A stack machine with a sparse heap, a call stack and labeled jumps.
    Owns all of its runtime state; `step()` executes one instruction and
    `run()` steps until End.
    """

    def __init__(self, program: Program, stdin=None, stdout=None, debug=False, log=None):
        self.program = program.instructions
        self.labels = program.labels
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout
        self.debug = debug
        self.log = log or sys.stderr

        self.stack = []
        self.heap = {}
        self.call_stack = []
        self.pc = 0
        self.halted = False

        self.handlers = self._create_handlers()

    def run(self):
        """Executes until End. Returns the final operand stack."""
        while not self.halted:
            self.step()
        return self.stack

    def step(self):
        if self.halted:
            raise ExecutionAfterHalt()
        if not 0 <= self.pc < len(self.program):
            raise ProgramOverrun(self.pc)

        instr = self.program[self.pc]
        if self.debug:
            print(f"{self.pc}: {instr}", file=self.log)
        try:
            target = self.handlers[instr.op](instr.arg)
        except ExecutionError as e:
            e.locate(self.pc, instr)
            raise
        self.pc = self.pc + 1 if target is None else target

    def state(self):
        return {
            'pc': self.pc,
            'halted': self.halted,
            'stack': list(self.stack),
            'heap': dict(self.heap),
            'call_stack': list(self.call_stack),
        }

    # Handlers take the instruction's operand (None if it has none) and
    # return the next program counter, or None to fall through.
    def _create_handlers(self):
        return {
            Op.PUSH:  self._push,
            Op.COPY:  self._copy,
            Op.SWAP:  self._swap,
            Op.POP:   self._drop,
            Op.ADD:   self._make_binary_op(operator.add),
            Op.SUB:   self._make_binary_op(operator.sub),
            Op.MULT:  self._make_binary_op(operator.mul),
            Op.DIV:   self._make_binary_op(trunc_div),
            Op.MOD:   self._make_binary_op(trunc_mod),
            Op.STORE: self._store,
            Op.LOAD:  self._load,
            Op.OUTC:  self._out_char,
            Op.OUTN:  self._out_num,
            Op.READC: self._read_char,
            Op.READN: self._read_num,
            Op.CALL:  self._call,
            Op.JUMP:  self._jump,
            Op.JZ:    self._jump_if(lambda v: v == 0),
            Op.JN:    self._jump_if(lambda v: v < 0),
            Op.RET:   self._ret,
            Op.END:   self._end,
        }

    def _pop(self, n=1):
        """Pops n values; the top of the stack comes first."""
        if len(self.stack) < n:
            raise StackUnderflow(n, len(self.stack))
        return [self.stack.pop() for _ in range(n)]

    def _target(self, label: int) -> int:
        if label not in self.labels:
            raise UndefinedLabel(label)
        return self.labels[label]

    # --- Stack ---
    def _push(self, n):
        self.stack.append(n)

    def _copy(self, _):
        if not self.stack:
            raise StackUnderflow(1, 0)
        self.stack.append(self.stack[-1])

    def _swap(self, _):
        a, b = self._pop(2)
        self.stack.extend((a, b))

    def _drop(self, _):
        self._pop()

    # --- Arithmetic ---
    def _make_binary_op(self, op: callable):
        def handler(_):
            b, a = self._pop(2)
            self.stack.append(op(a, b))
        return handler

    # --- Heap ---
    def _store(self, _):
        value, address = self._pop(2)
        self.heap[address] = value

    def _load(self, _):
        address, = self._pop()
        if address not in self.heap:
            raise UnboundHeapAddress(address)
        self.stack.append(self.heap[address])

    # --- I/O ---
    def _out_char(self, _):
        codepoint, = self._pop()
        # Lone surrogates pass chr() but cannot be written out.
        if not 0 <= codepoint <= 0x10FFFF or 0xD800 <= codepoint <= 0xDFFF:
            raise InvalidCharacter(codepoint)
        char = chr(codepoint)
        self.stdout.write(char)
        self.stdout.flush()

    def _out_num(self, _):
        value, = self._pop()
        self.stdout.write(str(value))
        self.stdout.flush()

    def _read_char(self, _):
        address, = self._pop()
        char = self.stdin.read(1)
        if not char:
            raise EndOfInput("character")
        self.heap[address] = ord(char)

    def _read_num(self, _):
        address, = self._pop()
        line = self.stdin.readline()
        if not line:
            raise EndOfInput("number")
        text = line.strip()
        if not _NUMBER.fullmatch(text):
            raise InvalidNumberInput(text)
        self.heap[address] = int(text)

    # --- Flow ---
    def _call(self, label):
        target = self._target(label)
        self.call_stack.append(self.pc)
        return target

    def _jump(self, label):
        return self._target(label)

    def _jump_if(self, test):
        def handler(label):
            value, = self._pop()
            if test(value):
                return self._target(label)
        return handler

    def _ret(self, _):
        if not self.call_stack:
            raise CallStackUnderflow()
        return self.call_stack.pop() + 1

    def _end(self, _):
        self.halted = True


def execute(program: Program, stdin=None, stdout=None, debug=False, log=None):
    """Runs `program` to completion and returns the interpreter."""
    interpreter = Interpreter(program, stdin=stdin, stdout=stdout, debug=debug, log=log)
    interpreter.run()
    return interpreter

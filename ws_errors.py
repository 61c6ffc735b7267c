"""Every failure the toolchain can raise.

Decoding and execution both stop at the first error. Each class also
derives from the closest builtin exception so callers that only know
about IndexError, ValueError and friends still catch them.
"""


class WhitespaceError(Exception):
    pass


# ===================================================================
#      DECODING
# ===================================================================

class DecodeError(WhitespaceError, ValueError):
    """Raised while turning source bytes into instructions.
    `offset` is the number of bytes consumed when the error was found.
    """
    def __init__(self, message: str, offset=None):
        self.offset = offset
        if offset is not None:
            message = f"{message} (at byte {offset})"
        super().__init__(message)


class UnexpectedEndOfStream(DecodeError):
    def __init__(self, offset=None):
        super().__init__("End of file reached while parsing an instruction", offset)


class UnterminatedProgram(DecodeError):
    def __init__(self, offset=None):
        super().__init__("End of file reached before the End instruction", offset)


class InstructionsAfterEnd(DecodeError):
    def __init__(self, offset=None):
        super().__init__("Instructions continue after end of program reached", offset)


class InvalidSign(DecodeError):
    def __init__(self, symbol, offset=None):
        self.symbol = symbol
        super().__init__(f"Number encountered an invalid sign! {symbol}", offset)


class NumberTooLarge(DecodeError):
    def __init__(self, bits: int, offset=None):
        self.bits = bits
        super().__init__(f"Number is larger than {bits} bits", offset)


class InvalidOperand(DecodeError):
    """A symbol that leads nowhere in the instruction prefix tree.
    Subclasses name the branch; `branch` describes the path taken so far.
    """
    branch = "Instruction"

    def __init__(self, symbol, offset=None):
        self.symbol = symbol
        super().__init__(f"{self.branch} encountered an invalid operand! {symbol}", offset)


class InvalidStackOperand(InvalidOperand):
    branch = "Stack Manipulation"

class InvalidArithmeticOperand(InvalidOperand):
    branch = "Arithmetic"

class InvalidDivModOperand(InvalidOperand):
    branch = "Arithmetic followed by [Tab]"

class InvalidHeapOperand(InvalidOperand):
    branch = "Heap"

class InvalidIOOperand(InvalidOperand):
    branch = "IO"

class InvalidOutputOperand(InvalidOperand):
    branch = "IO followed by [Space]"

class InvalidInputOperand(InvalidOperand):
    branch = "IO followed by [Tab]"

class InvalidEndOperand(InvalidOperand):
    branch = "Flow followed by [LF]"


# ===================================================================
#      LISTINGS
# ===================================================================

class ListingError(WhitespaceError, ValueError):
    def __init__(self, message: str, lineno=None):
        self.lineno = lineno
        if lineno is not None:
            message = f"line {lineno}: {message}"
        super().__init__(message)


# ===================================================================
#      EXECUTION
# ===================================================================

class ExecutionError(WhitespaceError):
    """Raised by the interpreter. `pc` and `instr` locate the failure
    once the interpreter has annotated it.
    """
    def __init__(self, message: str):
        self.message = message
        self.pc = None
        self.instr = None
        super().__init__(message)

    def locate(self, pc: int, instr):
        self.pc, self.instr = pc, instr
        self.args = (f"{self.message} (at {pc}: {instr})",)
        return self


class StackUnderflow(ExecutionError, IndexError):
    def __init__(self, needed: int, found: int):
        super().__init__(f"Stack underflow: needed {needed} item(s), found {found}")


class CallStackUnderflow(ExecutionError, IndexError):
    def __init__(self):
        super().__init__("Ret with an empty call stack")


class DivisionByZero(ExecutionError, ZeroDivisionError):
    def __init__(self):
        super().__init__("Division by zero")


class UnboundHeapAddress(ExecutionError, LookupError):
    def __init__(self, address: int):
        self.address = address
        super().__init__(f"Heap address {address} was never stored to")


class UndefinedLabel(ExecutionError, LookupError):
    def __init__(self, label: int):
        self.label = label
        super().__init__(f"Undefined label: {label}")


class ExecutionAfterHalt(ExecutionError):
    def __init__(self):
        super().__init__("Execution tried to continue after the program was done")


class ProgramOverrun(ExecutionError, IndexError):
    def __init__(self, pc: int):
        super().__init__(f"Program counter {pc} is past the last instruction")


class EndOfInput(ExecutionError, EOFError):
    def __init__(self, what: str):
        super().__init__(f"End of input while reading a {what}")


class InvalidNumberInput(ExecutionError, ValueError):
    def __init__(self, line: str):
        self.line = line
        super().__init__(f"Input is not a decimal integer: {line!r}")


class InvalidCharacter(ExecutionError, ValueError):
    def __init__(self, value: int):
        self.value = value
        super().__init__(f"Cannot output {value}: not a valid Unicode code point")

import io

import pytest

from decoder import Decoder, decode
from lexer import Lexer
from ws_types import *
from ws_errors import *


def ws(text):
    """Readable source: S=space, T=tab, L=line feed, everything else dropped."""
    return ''.join({'S': ' ', 'T': '\t', 'L': '\n'}.get(c, '') for c in text).encode()


def testPushAddOutN():
    # Push 5, Push 3, Add, OutN, End
    source = ws("SS STSTL  SS STTL  TSSS  TLST  LLL")
    assert [Push(5), Push(3), Add, OutN, End] == decode(source)


def testEveryInstruction():
    source = ws(
        "SSSTL"     # Push 1
        "SLS"       # Copy
        "SLT"       # Swap
        "SLL"       # Pop
        "TSSS TSST TSSL"  # Add Sub Mult
        "TSTS TSTT"       # Div Mod
        "TTS TTT"         # St Ld
        "TLSS TLST TLTS TLTT"  # OutC OutN ReadC ReadN
        "LSSSTSL"   # Label 2
        "LSTTTL"    # Call -1
        "LSLSL"     # Jump 0
        "LTSSTL"    # Jz 1
        "LTTSTTL"   # Jn 3
        "LTL"       # Ret
        "LLL"       # End
    )
    assert [
        Push(1), Copy, Swap, Pop,
        Add, Sub, Mult, Div, Mod,
        Store, Load,
        OutC, OutN, ReadC, ReadN,
        Label(2), Call(-1), Jump(0), Jz(1), Jn(3), Ret, End,
    ] == decode(source)


def testCommentsIgnored():
    source = b"push" + ws("SS") + b"five" + ws("STSTL") + b"end" + ws("LLL") + b"!"
    assert [Push(5), End] == decode(source)


def testDoneFlagSetOnEnd():
    decoder = Decoder(Lexer(ws("SSSTL LLL")))
    assert Push(1) == decoder.next_instruction()
    assert not decoder.done
    assert End == decoder.next_instruction()
    assert decoder.done
    assert decoder.next_instruction() is None


# --- Numbers ---

def number(source):
    return Decoder(Lexer(ws(source))).parse_number()


def testNumbers():
    assert 0 == number("SL")
    assert 0 == number("TL")
    assert 0 == number("SSSSL")
    assert 5 == number("STSTL")
    assert -5 == number("TTSTL")


def testMaxNumber():
    assert 2**31 - 1 == number("S" + "T" * 31 + "L")
    assert -(2**31 - 1) == number("T" + "T" * 31 + "L")


def testNumberTooLarge():
    with pytest.raises(NumberTooLarge):
        number("S" + "T" * 32 + "L")
    # Leading zeros count toward the limit.
    with pytest.raises(NumberTooLarge):
        number("S" + "S" * 31 + "TL")


def testInvalidSign():
    with pytest.raises(InvalidSign) as e:
        decode(ws("SSLL"))
    assert e.value.symbol is Symbol.LF


def testNumberUnterminated():
    with pytest.raises(UnexpectedEndOfStream):
        decode(ws("SSSTT"))


# --- Errors ---

@pytest.mark.parametrize("source, error", [
    ("ST", InvalidStackOperand),
    ("TSL", InvalidArithmeticOperand),
    ("TSTL", InvalidDivModOperand),
    ("TTL", InvalidHeapOperand),
    ("TLL", InvalidIOOperand),
    ("TLSL", InvalidOutputOperand),
    ("TLTL", InvalidInputOperand),
    ("LLS", InvalidEndOperand),
    ("LLT", InvalidEndOperand),
])
def testInvalidOperands(source, error):
    with pytest.raises(error) as e:
        decode(ws(source + "LLL"))
    assert isinstance(e.value, InvalidOperand)
    assert e.value.branch in str(e.value)


def testInvalidOperandNamesSymbol():
    with pytest.raises(InvalidHeapOperand) as e:
        decode(ws("TTL"))
    assert e.value.symbol is Symbol.LF
    assert "[LF]" in str(e.value)


def testTruncatedMidOpcode():
    with pytest.raises(UnexpectedEndOfStream):
        decode(ws("SSSTL T"))


def testUnterminatedProgram():
    with pytest.raises(UnterminatedProgram):
        decode(ws("SSSTL TLST"))


def testEmptySource():
    with pytest.raises(UnterminatedProgram):
        decode(b"nocode")


def testInstructionsAfterEnd():
    with pytest.raises(InstructionsAfterEnd):
        decode(ws("LLL SLS"))


def testTrailingCommentsAfterEnd():
    assert [End] == decode(ws("LLL") + b"fin")


def testDebugTrace():
    log = io.StringIO()
    decode(ws("SSSTL LLL"), debug=True, log=log)
    assert "Finished Instruction: Push 1\nFinished Instruction: End\n" == log.getvalue()


def testDecodeTextStream():
    source = ws("SSSTL LLL").decode()
    assert [Push(1), End] == decode(io.StringIO("x" + source))

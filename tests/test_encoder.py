import pytest

from decoder import decode, Decoder
from encoder import encode_number, encode_instr, encode_program, OP_PATHS
from lexer import Lexer
from ws_types import *
from ws_errors import NumberTooLarge


def decode_number(text):
    return Decoder(Lexer(text)).parse_number()


def testEncodeNumber():
    assert " \t \t\n" == encode_number(5)
    assert "\t\t \t\n" == encode_number(-5)
    assert " \n" == encode_number(0)


@pytest.mark.parametrize("n", [0, 1, -1, 42, -1000, 2**30, 2**31 - 1, -(2**31 - 1)])
def testNumberRoundTrip(n):
    assert n == decode_number(encode_number(n))


def testEncodeNumberTooLarge():
    with pytest.raises(NumberTooLarge):
        encode_number(2**31)
    with pytest.raises(NumberTooLarge):
        encode_number(-(2**31))


def testEveryOpHasAPath():
    assert set(OP_PATHS) == set(Op)
    assert "\n\n\n" == OP_PATHS[Op.END]
    assert "\t\n \t" == OP_PATHS[Op.OUTN]


def testEncodeInstr():
    assert "   \t\n" == encode_instr(Push(1))
    assert "\n\t\n" == encode_instr(Ret)


def testProgramRoundTrip():
    program = [
        Push(72), OutC, Label(1), Push(-3), Copy, Jn(2), Call(1),
        Label(2), Push(0), Push(9), Store, Push(0), Load, OutN, Ret,
        Swap, Pop, Sub, Mult, Div, Mod, ReadC, ReadN, Jz(1), Jump(2), Add, End,
    ]
    assert program == decode(encode_program(program))

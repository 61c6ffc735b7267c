from ws_types import Op, Program
from listing import parse_listing


def load(instructions) -> Program:
    """
    Splits decoded instructions into the executable sequence and the label
    table. A Label maps to the index the next non-label instruction takes;
    a repeated label number keeps the last position. Whether referenced
    labels exist is only checked when a jump actually executes.
    """
    code = []
    labels = {}
    for instr in instructions:
        if instr.op is Op.LABEL:
            labels[instr.arg] = len(code)
        else:
            code.append(instr)
    return Program(code, labels)


def load_listing(text: str) -> Program:
    return load(parse_listing(text))

import io
import sys

from ws_types import Symbol
from ws_errors import UnexpectedEndOfStream

_SYMBOLS = {ord(s.value): s for s in Symbol}


class Lexer:
    """
    Turns a byte stream into Symbols, one at a time. Text streams and str
    sources work too.
    Every byte other than space, tab and line feed is a comment and is
    skipped.
    """
    def __init__(self, source, trace=False, log=None):
        if isinstance(source, str):
            source = source.encode('utf-8')
        if isinstance(source, (bytes, bytearray)):
            source = io.BytesIO(source)
        self.stream = source
        self.offset = 0
        self.trace = trace
        self.log = log or sys.stderr

    def next_symbol(self, allow_end=False):
        """
        Returns the next Symbol. At the end of the stream, returns None if
        `allow_end` is set (a clean break between instructions), otherwise
        raises UnexpectedEndOfStream.
        """
        while (byte := self.stream.read(1)):
            self.offset += 1
            symbol = _SYMBOLS.get(ord(byte))
            if symbol is not None:
                if self.trace:
                    print(symbol, file=self.log)
                return symbol
        if allow_end:
            return None
        raise UnexpectedEndOfStream(self.offset)

    def symbols(self):
        """Yields every remaining symbol."""
        while (symbol := self.next_symbol(allow_end=True)) is not None:
            yield symbol

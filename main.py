import argparse
import sys
from pathlib import Path

from decoder import decode
from encoder import encode_program
from listing import format_listing, parse_listing
from loader import load, load_listing
from interpreter import Interpreter
from ws_errors import WhitespaceError, ExecutionError


def read_file(path, binary=False):
    try:
        if binary:
            with open(path, 'rb') as f:
                return f.read()
        with open(path, 'r', encoding='utf-8') as f:
            return f.read()
    except FileNotFoundError:
        print(f"Error: File not found at '{path}'", file=sys.stderr)
        sys.exit(1)
    except OSError as e:
        print(f"Error: Could not read file '{path}': {e}", file=sys.stderr)
        sys.exit(1)


def write_file(path, text):
    try:
        with open(path, 'w', encoding='utf-8', newline='') as f:
            f.write(text)
    except OSError as e:
        print(f"Error: Could not write file '{path}': {e}", file=sys.stderr)
        sys.exit(1)


def execute(program, args):
    interpreter = Interpreter(program, debug=args.debug)
    try:
        interpreter.run()
    except ExecutionError as e:
        print(f"\nRuntime Error: {e}", file=sys.stderr)
        print(f"Execution halted. Current stack: {interpreter.stack}", file=sys.stderr)
        if args.debug:
            print(f"Machine state: {interpreter.state()}", file=sys.stderr)
        sys.exit(1)

    if args.debug:
        state = interpreter.state()
        print("\n--- Execution Finished ---", file=sys.stderr)
        print(f"Final stack state: {state['stack']}", file=sys.stderr)
        print(f"Final heap state: {state['heap']}", file=sys.stderr)


def output_path(source, output, suffix):
    """Default output is SOURCE with `suffix`; never the source itself."""
    path = Path(output) if output else Path(source).with_suffix(suffix)
    if path.resolve() == Path(source).resolve():
        print(f"Error: Output would overwrite the input file '{source}'; pass -o", file=sys.stderr)
        sys.exit(1)
    return path


def decode_file(path, args):
    return decode(read_file(path, binary=True), debug=args.debug, trace=args.trace_symbols)


def cmd_decode(args):
    output = output_path(args.source, args.output, '.asm')
    instructions = decode_file(args.source, args)
    write_file(output, format_listing(instructions))


def cmd_run(args):
    execute(load_listing(read_file(args.listing)), args)


def cmd_exec(args):
    execute(load(decode_file(args.source, args)), args)


def cmd_assemble(args):
    output = output_path(args.listing, args.output, '.ws')
    instructions = parse_listing(read_file(args.listing))
    write_file(output, encode_program(instructions))


def build_parser():
    parser = argparse.ArgumentParser(
        prog="wsi",
        description="A Whitespace decoder and interpreter.\n\n"
                    "Source programs are made of spaces, tabs and line feeds;\n"
                    "every other byte is a comment. Listings hold one\n"
                    "instruction per line, e.g. 'Push 5'.",
        formatter_class=argparse.RawTextHelpFormatter
    )
    parser.add_argument("-d", "--debug", action="store_true",
                        help="Trace decoded and executed instructions and print the final machine state.")
    parser.add_argument("--trace-symbols", action="store_true",
                        help="Print every source symbol as it is read.")
    commands = parser.add_subparsers(dest="command", required=True)

    p = commands.add_parser("decode", help="Decode a source file into a listing.")
    p.add_argument("source", help="Path to the whitespace source file.")
    p.add_argument("-o", "--output", help="Listing path (default: SOURCE with a .asm suffix).")
    p.set_defaults(func=cmd_decode)

    p = commands.add_parser("run", help="Load a listing and execute it.")
    p.add_argument("listing", help="Path to the listing file.")
    p.set_defaults(func=cmd_run)

    p = commands.add_parser("exec", help="Decode a source file and execute it directly.")
    p.add_argument("source", help="Path to the whitespace source file.")
    p.set_defaults(func=cmd_exec)

    p = commands.add_parser("assemble", help="Encode a listing into whitespace source.")
    p.add_argument("listing", help="Path to the listing file.")
    p.add_argument("-o", "--output", help="Source path (default: LISTING with a .ws suffix).")
    p.set_defaults(func=cmd_assemble)
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    try:
        args.func(args)
    except WhitespaceError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nInterrupted by user.", file=sys.stderr)
        sys.exit(130)


if __name__ == "__main__":
    main()

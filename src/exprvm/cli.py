"""exprvm CLI: compile and evaluate one expression.

Usage:
    exprvm "10 + (4 * 3 + 8 / 2)"            Evaluate
    exprvm "2 + X * 3" -D X=4                Define a variable
    exprvm "PI * r * r" -c PI=3.14159 -D r=2 Define a constant
    exprvm "lerp(0, 10, t)" --lib -D t=0.5   Extended math functions
    exprvm "a + b" -l                        Print the bytecode listing

Pipeline:
    1. Build registry (defaults, optional math library, definitions)
    2. Compile to postfix bytecode
    3. Execute on the value stack
"""

import argparse
import sys

from .errors import ExprVMError
from .registry import Registry, MAX_SYMBOLS, MAX_FUNCTIONS
from .tokenizer import scan_number
from .compiler import compile, DEFAULT_CAPACITY
from .machine import execute, STACK_CAPACITY
from .library import register_math_library
from .listing import format_bytecode


def _definition(text):
    """argparse type for ``NAME=VALUE``."""
    name, sep, raw = text.partition('=')
    name = name.strip()
    if not sep or not name:
        raise argparse.ArgumentTypeError(
            f"expected NAME=VALUE, got '{text}'")
    value, end = scan_number(raw)
    if not any(c.isdigit() for c in raw) or raw[end:].strip():
        raise argparse.ArgumentTypeError(f"invalid number in '{text}'")
    return name, value


def main(argv=None):
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        prog='exprvm',
        description='Compile and evaluate a math expression.',
        epilog="""Examples:
  exprvm "2 + 4 * 3"                  14
  exprvm "(2 + 4) * 3"                18
  exprvm "2 + abs(-2)"                4
  exprvm "2 + 4 + TEST" -D TEST=4     10
  exprvm "pow(2, 8)" --lib            256""")

    parser.add_argument('expression', help='Infix expression to evaluate')
    parser.add_argument('-D', '--define', type=_definition, action='append',
                        default=[], metavar='NAME=VALUE',
                        help='Define a variable (repeatable)')
    parser.add_argument('-c', '--constant', type=_definition, action='append',
                        default=[], metavar='NAME=VALUE',
                        help='Define a constant (repeatable)')
    parser.add_argument('--lib', action='store_true',
                        help='Register ramp, lerp, range, saturate, random, pow')
    parser.add_argument('--seed', type=int, default=None,
                        help='Seed for random() (default: unseeded)')
    parser.add_argument('-r', '--result', default=None, metavar='NAME',
                        help='Also store the result in variable NAME')
    parser.add_argument('-l', '--listing', action='store_true',
                        help='Print the compiled bytecode')

    # Advanced
    parser.add_argument('--capacity', type=int, default=DEFAULT_CAPACITY,
                        help=f'Token/bytecode capacity (default: {DEFAULT_CAPACITY})')
    parser.add_argument('--stack', type=int, default=STACK_CAPACITY,
                        help=f'Value stack capacity (default: {STACK_CAPACITY})')
    parser.add_argument('--max-symbols', type=int, default=MAX_SYMBOLS,
                        help=f'Symbol table size (default: {MAX_SYMBOLS})')
    parser.add_argument('--max-functions', type=int, default=MAX_FUNCTIONS,
                        help=f'Function table size (default: {MAX_FUNCTIONS})')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Show listing and tracebacks')

    args = parser.parse_args(argv)

    if args.capacity < 1:
        parser.error(f"--capacity must be positive, got {args.capacity}")
    if args.stack < 1:
        parser.error(f"--stack must be positive, got {args.stack}")

    try:
        return run(args)
    except ExprVMError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nAborted.", file=sys.stderr)
        return 130
    except Exception as e:
        print(f"Unexpected error: {type(e).__name__}: {e}", file=sys.stderr)
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 2


def run(args) -> int:
    """Build the registry, compile, execute and print the result."""
    with Registry(args.max_symbols, args.max_functions) as reg:
        if args.lib:
            register_math_library(reg, args.seed)
        for name, value in args.constant:
            reg.add_constant(name, value)
        for name, value in args.define:
            reg.add_variable(name, value)
        if args.result and reg.find_variable(args.result) is None:
            reg.add_variable(args.result, 0.0)

        code = compile(reg, args.expression, args.capacity)
        if args.listing or args.verbose:
            print(format_bytecode(code))

        result = execute(reg, code, result_name=args.result,
                         stack_capacity=args.stack)

    print(f"{result:g}")
    return 0

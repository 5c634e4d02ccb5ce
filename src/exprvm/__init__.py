"""exprvm: compile infix math expressions to postfix bytecode and run them.

Supports:
  - Numbers, variables, constants and registered functions
  - + - * / with precedence, unary + and -, parentheses
  - f(a, b, ...) calls with any registered arity
  - Unknown names auto-declared as variables (value 0)
  - Reusable bytecode: compile once, execute many times

Architecture:
  Registry holds bounded variable/function tables.
  Tokenizer + compiler turn source into postfix bytecode.
  Stack machine runs bytecode on a fixed-size float32 stack.

Usage as library:
    from exprvm import Registry, compile, execute
    reg = Registry()
    reg.add_variable('t', 0.0)
    code = compile(reg, 'sin(t) * 2')
    for frame in range(60):
        reg.set_variable('t', frame / 60)
        value = execute(reg, code)
"""

__version__ = '1.0.0'

from .errors import (ExprVMError, CapacityExceededError, OutputTooSmallError,
                     SymbolNotFoundError, RegistryMismatchError,
                     ExecutionError, NoResultError, InsufficientOperandsError,
                     StackOverflowError)
from .registry import Registry
from .compiler import Bytecode, compile, DEFAULT_CAPACITY
from .machine import execute, try_execute, error_message


def evaluate(text, variables=None, capacity=DEFAULT_CAPACITY):
    """Evaluate *text* once in a fresh registry.

    Args:
        text:      Expression.
        variables: Optional ``{name: value}`` defined before compiling.
        capacity:  Token/bytecode capacity.

    Returns:
        float result.
    """
    with Registry() as reg:
        for name, value in (variables or {}).items():
            reg.add_variable(name, value)
        return execute(reg, compile(reg, text, capacity))

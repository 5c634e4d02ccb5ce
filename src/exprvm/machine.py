"""Stack machine: run postfix bytecode against a fixed-size value stack.

One left-to-right pass.  Numbers and variables push a value; functions
check that the stack holds at least ``arity`` values and then run their
callback.  Whatever is on top at the end is the result; values below it
are ignored.

Error codes:
  0  success
  1  no return value on stack
  2  requested number of parameters not found on stack
  3  stack capacity exceeded
"""

import numpy as np

from .errors import (ExecutionError, NoResultError, InsufficientOperandsError,
                     StackOverflowError, RegistryMismatchError)

STACK_CAPACITY = 32

OK = 0
NO_RESULT = NoResultError.code
INSUFFICIENT_OPERANDS = InsufficientOperandsError.code
STACK_OVERFLOW = StackOverflowError.code

ERROR_MESSAGES = {
    OK: "success",
    NO_RESULT: "no return value on stack",
    INSUFFICIENT_OPERANDS: "requested number of parameters not found on stack",
    STACK_OVERFLOW: "stack capacity exceeded",
}


def error_message(code):
    """Human readable text for an execution error code."""
    return ERROR_MESSAGES.get(code, f"unknown error {code}")


class ValueStack:
    """Fixed-capacity float32 stack handed to function callbacks."""
    __slots__ = ('data', 'size')

    def __init__(self, capacity=STACK_CAPACITY):
        self.data = np.zeros(capacity, dtype=np.float32)
        self.size = 0

    @property
    def capacity(self):
        return len(self.data)

    def __len__(self):
        return self.size

    def push(self, value):
        if self.size >= len(self.data):
            raise StackOverflowError(
                f"Value stack overflow ({len(self.data)} entries)")
        self.data[self.size] = value
        self.size += 1

    def pop(self):
        if self.size == 0:
            raise InsufficientOperandsError(error_message(INSUFFICIENT_OPERANDS))
        self.size -= 1
        return self.data[self.size]

    def peek(self):
        if self.size == 0:
            raise NoResultError(error_message(NO_RESULT))
        return self.data[self.size - 1]


def _check_registry(registry, bytecode):
    owner = getattr(bytecode, 'registry', registry)
    if owner is not registry:
        raise RegistryMismatchError(
            "Bytecode was compiled against a different registry")
    if registry.closed:
        raise RegistryMismatchError("Registry has been destroyed")


def _check_indices(registry, tokens):
    """Bounds-check var/func indices of a plain token list."""
    tables = {'var': registry.variables, 'func': registry.functions}
    for pos, (kind, value) in enumerate(tokens):
        table = tables.get(kind)
        if table is not None and not 0 <= value < len(table):
            raise RegistryMismatchError(
                f"Token {pos} refers to {kind} {value}, registry has "
                f"{len(table)}")


def execute(registry, bytecode, token_count=None, result_name=None,
            stack_capacity=STACK_CAPACITY):
    """Execute *bytecode* and return the result.

    Args:
        registry:       Registry the bytecode was compiled against.
        bytecode:       :class:`~exprvm.compiler.Bytecode` (or a plain
                        token list, whose indices are bounds-checked).
        token_count:    Run only the first N instructions (default: all).
        result_name:    If it names an existing variable, store the result
                        there.
        stack_capacity: Size of the value stack.

    Returns:
        The top-of-stack value as a float.

    Raises:
        ExecutionError subclass carrying the error ``code``.
        RegistryMismatchError for bytecode from another registry.
    """
    _check_registry(registry, bytecode)
    if hasattr(bytecode, 'tokens'):
        tokens = bytecode.tokens
    else:
        tokens = bytecode
        _check_indices(registry, tokens)
    if token_count is not None:
        tokens = tokens[:token_count]

    variables = registry.variables
    functions = registry.functions
    stack = ValueStack(stack_capacity)

    with np.errstate(all='ignore'):
        for pos, (kind, value) in enumerate(tokens):
            if kind == 'num':
                stack.push(value)
            elif kind == 'var':
                stack.push(variables[value].value)
            elif kind == 'func':
                f = functions[value]
                if stack.size < f.arity:
                    raise InsufficientOperandsError(
                        f"{error_message(INSUFFICIENT_OPERANDS)}: "
                        f"'{f.name}' needs {f.arity}, found {stack.size}",
                        position=pos)
                f.callback(stack)

    if stack.size == 0:
        raise NoResultError(error_message(NO_RESULT))
    result = float(stack.pop())

    if result_name is not None:
        i = registry.find_variable(result_name)
        if i is not None:
            variables[i].value = result
    return result


def try_execute(registry, bytecode, token_count=None, result_name=None,
                stack_capacity=STACK_CAPACITY):
    """Like :func:`execute` but returns ``(code, value)`` instead of raising.

    Returns:
        ``(0, result)`` on success, ``(code, 0.0)`` on an execution error.
    """
    try:
        return OK, execute(registry, bytecode, token_count, result_name,
                           stack_capacity)
    except ExecutionError as e:
        return e.code, 0.0

"""Symbol registry: the variables and functions one expression context knows.

Both tables are bounded.  Entries are appended and never removed, so an
index handed out by :meth:`Registry.add_variable` or
:meth:`Registry.add_function` stays valid for the registry's lifetime and
can be baked into compiled bytecode.

Names are keyed by their 32-bit FNV-1a hash.  The name itself is kept
next to the hash and compared on a hash match, so two distinct names
that collide are still told apart.
"""

import math

from .errors import CapacityExceededError, SymbolNotFoundError

MAX_SYMBOLS = 32
MAX_FUNCTIONS = 32

FNV_SEED = 0x811C9DC5
FNV_PRIME = 0x01000193

VARIABLE = 'variable'
CONSTANT = 'constant'


def fnv1a(name):
    """32-bit FNV-1a hash of *name* (UTF-8 bytes, case-sensitive)."""
    h = FNV_SEED
    for b in name.encode('utf-8'):
        h = ((h ^ b) * FNV_PRIME) & 0xFFFFFFFF
    return h


# ══════════════════════════════════════════════════════════════════════
# DATA TYPES
# ══════════════════════════════════════════════════════════════════════

class Symbol:
    """A named variable or constant holding one float."""
    __slots__ = ('kind', 'name', 'name_hash', 'value')

    def __init__(self, kind, name, value=0.0):
        self.kind = kind
        self.name = name
        self.name_hash = fnv1a(name)
        self.value = float(value)

    def __repr__(self):
        return f"Symbol({self.kind} {self.name}={self.value:g})"


class Function:
    """A callable stack operation.

    ``callback(stack)`` must pop exactly ``arity`` values and push exactly
    one result.  Arity-0 functions push and pop nothing.
    """
    __slots__ = ('name', 'name_hash', 'callback', 'precedence', 'arity')

    def __init__(self, name, callback, precedence, arity):
        self.name = name
        self.name_hash = fnv1a(name)
        self.callback = callback
        self.precedence = precedence
        self.arity = arity

    def __repr__(self):
        return (f"Function({self.name}, prec={self.precedence}, "
                f"arity={self.arity})")


# ══════════════════════════════════════════════════════════════════════
# DEFAULT FUNCTIONS
# ══════════════════════════════════════════════════════════════════════

def op_nop(stack):
    pass


def op_add(stack):
    stack.push(stack.pop() + stack.pop())


def op_sub(stack):
    a = stack.pop()
    b = stack.pop()
    stack.push(b - a)


def op_mul(stack):
    stack.push(stack.pop() * stack.pop())


def op_div(stack):
    a = stack.pop()
    b = stack.pop()
    stack.push(b / a)


def op_neg(stack):
    stack.push(-stack.pop())


def op_pos(stack):
    stack.push(stack.pop())


def op_sin(stack):
    stack.push(math.sin(stack.pop()))


def op_cos(stack):
    stack.push(math.cos(stack.pop()))


def op_abs(stack):
    stack.push(abs(stack.pop()))


# (name, callback, precedence, arity) in registration order
DEFAULT_FUNCTIONS = (
    (',',   op_nop,  1, 0),
    ('+',   op_add, 12, 2),
    ('-',   op_sub, 12, 2),
    ('*',   op_mul, 13, 2),
    ('/',   op_div, 13, 2),
    ('u-',  op_neg, 16, 1),
    ('u+',  op_pos, 16, 1),
    ('sin', op_sin, 17, 1),
    ('cos', op_cos, 17, 1),
    ('abs', op_abs, 17, 1),
)


# ══════════════════════════════════════════════════════════════════════
# REGISTRY
# ══════════════════════════════════════════════════════════════════════

class Registry:
    """Bounded variable and function tables for one evaluation context."""

    def __init__(self, max_symbols=MAX_SYMBOLS, max_functions=MAX_FUNCTIONS,
                 defaults=True):
        self.max_symbols = max_symbols
        self.max_functions = max_functions
        self.variables = []     # [Symbol, ...]
        self.functions = []     # [Function, ...]
        self.closed = False
        if defaults:
            for name, callback, prec, arity in DEFAULT_FUNCTIONS:
                self.add_function(name, callback, prec, arity)

    def __repr__(self):
        return (f"Registry({len(self.variables)}/{self.max_symbols} symbols, "
                f"{len(self.functions)}/{self.max_functions} functions)")

    # ── Context manager ───────────────────────────────────────────────

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False

    def close(self):
        """Release both tables.  Bytecode compiled earlier stops working."""
        self.variables = []
        self.functions = []
        self.closed = True

    destroy = close

    # ── Registration ──────────────────────────────────────────────────

    def _add_symbol(self, kind, name, value):
        if len(self.variables) >= self.max_symbols:
            raise CapacityExceededError(
                f"Cannot add {kind} '{name}': symbol table is full "
                f"({self.max_symbols} entries)")
        self.variables.append(Symbol(kind, name, value))
        return len(self.variables) - 1

    def add_variable(self, name, value=0.0):
        """Append a variable and return its index."""
        return self._add_symbol(VARIABLE, name, value)

    def add_constant(self, name, value):
        """Append a constant and return its index.

        Constants live in the same table as variables; the kind is a label
        for callers, the evaluator reads both the same way.
        """
        return self._add_symbol(CONSTANT, name, value)

    def add_function(self, name, callback, precedence, arity):
        """Append a function and return its index.

        Args:
            name:       Lookup name (identifier or 1-2 symbol characters).
            callback:   ``callback(stack)``; pops *arity*, pushes one.
            precedence: 0..255, higher binds tighter.
            arity:      0..255 values popped from the stack.
        """
        if not 0 <= precedence <= 255:
            raise ValueError(f"precedence must be 0-255, got {precedence}")
        if not 0 <= arity <= 255:
            raise ValueError(f"arity must be 0-255, got {arity}")
        if len(self.functions) >= self.max_functions:
            raise CapacityExceededError(
                f"Cannot add function '{name}': function table is full "
                f"({self.max_functions} entries)")
        self.functions.append(Function(name, callback, precedence, arity))
        return len(self.functions) - 1

    # ── Lookup ────────────────────────────────────────────────────────

    @staticmethod
    def _scan(entries, name):
        h = fnv1a(name)
        for i, e in enumerate(entries):
            if e.name_hash == h and e.name == name:
                return i
        return None

    def find_variable(self, name):
        """Index of the first variable/constant called *name*, or None."""
        return self._scan(self.variables, name)

    def find_function(self, name):
        """Index of the first function called *name*, or None."""
        return self._scan(self.functions, name)

    def set_variable(self, name, value):
        """Overwrite the value of an existing variable in place."""
        i = self.find_variable(name)
        if i is None:
            raise SymbolNotFoundError(f"Unknown variable '{name}'")
        self.variables[i].value = float(value)

    def get_variable(self, name):
        i = self.find_variable(name)
        if i is None:
            raise SymbolNotFoundError(f"Unknown variable '{name}'")
        return self.variables[i].value

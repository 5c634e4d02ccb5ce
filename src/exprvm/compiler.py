"""Precedence parser: infix tokens → postfix bytecode.

Shunting-yard with one twist: operators are ordered by the pair
``(paren_depth, precedence)``, depth first.  Parentheses never reach the
output; they only raise or lower the depth that incoming operators are
tagged with.  An operator already on the stack is emitted while its key
is greater than or equal to the incoming one, so equal precedence folds
left.

The argument separator ``,`` is an arity-0 no-op at precedence 1.  It
sits below every real operator inside the same parentheses, so
``f(a + b, c)`` folds ``a + b`` before the comma is pushed.
"""

from .errors import OutputTooSmallError
from .tokenizer import tokenize

DEFAULT_CAPACITY = 64


class Bytecode:
    """Postfix instruction list bound to the registry it was compiled for."""
    __slots__ = ('registry', 'tokens', 'source', 'capacity', 'overflow')

    def __init__(self, registry, tokens, source='', capacity=None,
                 overflow=0):
        self.registry = registry
        self.tokens = tokens
        self.source = source
        self.capacity = capacity
        self.overflow = overflow

    @property
    def token_count(self):
        return len(self.tokens)

    def __len__(self):
        return len(self.tokens)

    def __iter__(self):
        return iter(self.tokens)

    def __getitem__(self, i):
        return self.tokens[i]

    def __repr__(self):
        return f"Bytecode({self.source!r}, {len(self.tokens)} tokens)"


def to_postfix(registry, tokens):
    """Reorder infix *tokens* into postfix order."""
    out = []
    ops = []            # [(token, precedence, depth), ...]
    depth = 0

    for tok in tokens:
        kind = tok[0]
        if kind in ('num', 'var'):
            out.append(tok)
        elif kind == 'lparen':
            depth += 1
        elif kind == 'rparen':
            depth -= 1
        elif kind == 'func':
            prec = registry.functions[tok[1]].precedence
            key = (depth, prec)
            while ops and (ops[-1][2], ops[-1][1]) >= key:
                out.append(ops.pop()[0])
            ops.append((tok, prec, depth))

    while ops:
        out.append(ops.pop()[0])
    return out


def compile(registry, source, capacity=DEFAULT_CAPACITY, strict=True):
    """Tokenize and compile *source* into :class:`Bytecode`.

    Args:
        registry: Registry to resolve names against (may gain variables).
        source:   Infix expression text.
        capacity: Maximum number of tokens/instructions (None = unlimited).
        strict:   If True, overflowing *capacity* raises
                  :class:`OutputTooSmallError`.  If False, excess tokens
                  are dropped and counted in ``Bytecode.overflow``.

    Returns:
        :class:`Bytecode`.
    """
    tokens, overflow = tokenize(registry, source, capacity)
    code = to_postfix(registry, tokens)
    if overflow and strict:
        raise OutputTooSmallError(
            f"Expression '{source}' needs more than {capacity} tokens "
            f"({overflow} dropped)", overflow)
    return Bytecode(registry, code, source, capacity, overflow)

"""Optional math functions on top of the ten defaults.

  ramp(t, a)       1 if a >= t else 0
  lerp(b, a, t)    (1 - t) * b + t * a
  range(a, b, t)   1 if a <= t <= b else 0
  saturate(x)      x clamped to 0..1
  random(lo, hi)   uniform sample in [lo, hi)
  pow(x, y)        x ** y

All bind at precedence 17 like the built-in sin/cos/abs.
"""

import numpy as np

FUNCTION_PRECEDENCE = 17


def op_ramp(stack):
    a = stack.pop()
    t = stack.pop()
    stack.push(1.0 if a >= t else 0.0)


def op_lerp(stack):
    t = stack.pop()
    a = stack.pop()
    b = stack.pop()
    stack.push((1.0 - t) * b + t * a)


def op_range(stack):
    t = stack.pop()
    b = stack.pop()
    a = stack.pop()
    stack.push(1.0 if a <= t <= b else 0.0)


def op_saturate(stack):
    stack.push(np.clip(stack.pop(), 0.0, 1.0))


def op_pow(stack):
    a = stack.pop()
    b = stack.pop()
    stack.push(np.power(b, a))


def make_random(rng):
    """Build a ``random(lo, hi)`` callback drawing from *rng*."""
    def op_random(stack):
        hi = stack.pop()
        lo = stack.pop()
        stack.push(rng.uniform(lo, hi))
    return op_random


def register_math_library(registry, seed=None):
    """Register the extended functions on *registry*.

    Args:
        registry: Target registry (needs 6 free function slots).
        seed:     Seed for ``random``; None draws fresh OS entropy.

    Returns:
        ``{name: function_index}``.
    """
    rng = np.random.default_rng(seed)
    table = (
        ('ramp',     op_ramp,          2),
        ('lerp',     op_lerp,          3),
        ('range',    op_range,         3),
        ('saturate', op_saturate,      1),
        ('random',   make_random(rng), 2),
        ('pow',      op_pow,           2),
    )
    return {name: registry.add_function(name, fn, FUNCTION_PRECEDENCE, arity)
            for name, fn, arity in table}

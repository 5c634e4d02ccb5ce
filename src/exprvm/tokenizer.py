"""Expression tokenizer.

Turns source text into ``(kind, value)`` tokens:

  ========  ==========================
  kind      value
  ========  ==========================
  num       float literal
  var       symbol index in registry
  func      function index in registry
  lparen    None
  rparen    None
  ========  ==========================

Identifiers that are neither a known variable nor a known function are
declared as new variables with value 0.0, so an expression may refer to
inputs that are set later.
"""

WHITESPACE = ' \t\r\n'
DIGITS = '0123456789'


def _is_ident_start(c):
    return ('a' <= c <= 'z') or ('A' <= c <= 'Z') or c == '_'


def _is_ident_char(c):
    return _is_ident_start(c) or ('0' <= c <= '9')


def scan_number(text, pos=0):
    """Scan a decimal literal starting at *pos*.

    Skips leading whitespace and honors one optional ``+``/``-`` sign.
    No exponent notation.

    Returns:
        ``(value, end)`` where *end* is the index after the literal.
    """
    n = len(text)
    while pos < n and text[pos] in WHITESPACE:
        pos += 1
    sign = 1.0
    if pos < n and text[pos] == '-':
        sign = -1.0
        pos += 1
    elif pos < n and text[pos] == '+':
        pos += 1
    value = 0.0
    while pos < n and text[pos] in DIGITS:
        value = value * 10.0 + (ord(text[pos]) - 48)
        pos += 1
    if pos < n and text[pos] == '.':
        pos += 1
        frac, dec = 0.0, 1.0
        while pos < n and text[pos] in DIGITS:
            frac = frac * 10.0 + (ord(text[pos]) - 48)
            dec *= 10.0
            pos += 1
        value += frac / dec
    return value * sign, pos


def token_for_identifier(registry, name):
    """Resolve *name*: variable first, then function, else declare it."""
    i = registry.find_variable(name)
    if i is not None:
        return ('var', i)
    i = registry.find_function(name)
    if i is not None:
        return ('func', i)
    return ('var', registry.add_variable(name, 0.0))


def tokenize(registry, source, capacity=None):
    """Tokenize *source* against *registry*.

    Args:
        registry: :class:`~exprvm.registry.Registry`; may gain new
                  variables for unknown identifiers.
        source:   Expression text.
        capacity: Maximum tokens kept (None = unlimited).

    Returns:
        ``(tokens, overflow)`` where *overflow* counts tokens dropped
        because *capacity* was reached.
    """
    tokens = []
    overflow = 0
    binary = False      # True when the previous token ended an operand
    i = 0
    n = len(source)

    while i < n:
        c = source[i]
        tok = None

        if c in DIGITS:
            value, i = scan_number(source, i)
            tok = ('num', value)
            binary = True

        elif _is_ident_start(c):
            j = i
            while j < n and _is_ident_char(source[j]):
                j += 1
            tok = token_for_identifier(registry, source[i:j])
            i = j
            binary = True

        else:
            if c in WHITESPACE:
                pass
            elif c == '(':
                tok = ('lparen', None)
                binary = False
            elif c == ')':
                tok = ('rparen', None)
                binary = True
            elif c in '+-':
                tok = token_for_identifier(registry, c if binary else 'u' + c)
                binary = False
            else:
                pair = source[i:i + 2]
                if len(pair) == 2 and registry.find_function(pair) is not None:
                    tok = token_for_identifier(registry, pair)
                    i += 1
                else:
                    tok = token_for_identifier(registry, c)
                binary = False
            i += 1

        if tok is not None:
            if capacity is not None and len(tokens) >= capacity:
                overflow += 1
            else:
                tokens.append(tok)

    return tokens, overflow

"""Error types for exprvm."""


class ExprVMError(Exception):
    """Base error for exprvm."""
    pass


class CapacityExceededError(ExprVMError):
    """A registry table is already at its fixed capacity."""
    pass


class OutputTooSmallError(ExprVMError):
    """Token or bytecode output did not fit the caller's capacity."""

    def __init__(self, msg, overflow=0):
        self.overflow = overflow
        super().__init__(msg)


class SymbolNotFoundError(ExprVMError, KeyError):
    """No variable or constant with the requested name."""

    def __str__(self):
        return str(self.args[0]) if self.args else ''


class RegistryMismatchError(ExprVMError):
    """Bytecode executed against a registry it was not compiled for."""
    pass


class ExecutionError(ExprVMError):
    """Stack machine failure.  ``code`` is the numeric error code."""
    code = -1

    def __init__(self, msg, position=None):
        self.position = position
        super().__init__(msg)


class NoResultError(ExecutionError):
    """Nothing left on the stack after execution."""
    code = 1


class InsufficientOperandsError(ExecutionError):
    """A function found fewer values on the stack than its arity."""
    code = 2


class StackOverflowError(ExecutionError):
    """Execution pushed past the value stack capacity."""
    code = 3

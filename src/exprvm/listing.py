"""Human readable bytecode listing."""


def format_bytecode(bytecode):
    """Render *bytecode* and its registry's variables as text.

    Example::

        variables:
            0 = TEST : 4
        code (5):
            0  num   2
            1  num   4
            2  func  +
            3  var   TEST (4)
            4  func  +
    """
    reg = bytecode.registry
    lines = ['variables:']
    for i, sym in enumerate(reg.variables):
        tag = ' (const)' if sym.kind == 'constant' else ''
        lines.append(f"  {i:3d} = {sym.name} : {sym.value:g}{tag}")
    lines.append(f"code ({len(bytecode)}):")
    for i, (kind, value) in enumerate(bytecode):
        if kind == 'num':
            operand = f"{value:g}"
        elif kind == 'var':
            sym = reg.variables[value]
            operand = f"{sym.name} ({sym.value:g})"
        else:
            operand = reg.functions[value].name
        lines.append(f"  {i:3d}  {kind:<5s} {operand}")
    if bytecode.overflow:
        lines.append(f"  ({bytecode.overflow} tokens dropped)")
    return '\n'.join(lines)

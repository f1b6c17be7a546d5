# achievements/registry.py

from .conditions import gt, gte, lt, lte, eq, ne

OPERATORS = {
    ">": gt,
    ">=": gte,
    "<": lt,
    "<=": lte,
    "==": eq,
    "!=": ne,
}


def compare(value, op: str, target) -> bool:
    operator_fn = OPERATORS.get(op)
    if operator_fn is None:
        return False
    return operator_fn(value, target)

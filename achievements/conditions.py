# achievements/conditions.py

def gt(value, target):
    return value > target


def gte(value, target):
    return value >= target


def lt(value, target):
    return value < target


def lte(value, target):
    return value <= target


def eq(value, target):
    return value == target


def ne(value, target):
    return value != target

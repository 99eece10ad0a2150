"""Binary operator semantics as a finite table keyed by (operator, left kind, right kind).

Supporting a new operand combination means adding a table entry; any combination missing from the table is an
unsupported operation.

Integer division and modulo truncate toward zero (C semantics), unlike Python's flooring // and %:
-7 // 2 == -3 and -7 % 2 == -1.

Integer results are limited to MAX_INT_BITS bits. Anything that does not fit (an int result that is too large, an int
too large to widen to float, a string repetition that cannot be allocated) is a "numeric result out of range" error.
"""

import math
import operator

from minipy.lang.error import DivisionByZeroError, SemanticError, UnsupportedOperationError
from minipy.lang.values import MAX_INT_BITS, NUMERIC, Value, ValueKind

ADDITIVE = ("+", "-")
MULTIPLICATIVE = ("*", "/", "//", "%")
POWER = "**"
COMPARISONS = ("==", "!=", "<", "<=", ">", ">=")


def _out_of_range(symbol):
    return SemanticError("numeric result out of range in '{}'", symbol)


def _numeric_result(left, right, number):
    if left.kind is ValueKind.INT and right.kind is ValueKind.INT:
        return Value.of_int(number)
    return Value.of_float(number)


def _arithmetic(func):
    def apply(left, right):
        return _numeric_result(left, right, func(left.data, right.data))
    return apply


def _check_divisor(symbol, divisor):
    if divisor == 0:
        raise DivisionByZeroError("division by zero in '{}'", symbol)


def _divide(left, right):
    _check_divisor("/", right.data)
    return Value.of_float(left.data / right.data)


def _trunc_div(dividend, divisor):
    quotient = abs(dividend) // abs(divisor)
    return quotient if (dividend < 0) == (divisor < 0) else -quotient


def _int_divide(left, right):
    dividend, divisor = math.trunc(left.data), math.trunc(right.data)
    _check_divisor("//", divisor)
    return _numeric_result(left, right, _trunc_div(dividend, divisor))


def _modulo(left, right):
    dividend, divisor = math.trunc(left.data), math.trunc(right.data)
    _check_divisor("%", divisor)
    return _numeric_result(left, right, dividend - divisor * _trunc_div(dividend, divisor))


def _power(left, right):
    if left.kind is ValueKind.INT and right.kind is ValueKind.INT and right.data >= 0:
        if abs(left.data) > 1 and (abs(left.data).bit_length() - 1) * right.data > MAX_INT_BITS:
            raise _out_of_range(POWER)  # bound is checked before computing
        return Value.of_int(left.data ** right.data)

    try:
        return Value.of_float(math.pow(left.data, right.data))
    except ValueError:
        if left.data == 0:
            raise DivisionByZeroError("zero cannot be raised to a negative power in '{}'", POWER) from None
        raise SemanticError("math domain error in '{}'", POWER) from None
    except OverflowError:
        raise _out_of_range(POWER) from None


def _numeric_compare(func):
    def apply(left, right):
        if left.kind is ValueKind.INT and right.kind is ValueKind.INT:
            return Value.of_bool(func(left.data, right.data))
        return Value.of_bool(func(float(left.data), float(right.data)))  # mixed operands are widened
    return apply


def _string_op(func, wrap):
    def apply(left, right):
        return wrap(func(left.data, right.data))
    return apply


def _repeat(left, right):
    if left.kind is ValueKind.STRING:
        return Value.of_string(left.data * right.data)
    return Value.of_string(right.data * left.data)


COMPARE_FUNCS = {
    "==": operator.eq,
    "!=": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}

NUMERIC_OPERATIONS = {
    "+": _arithmetic(operator.add),
    "-": _arithmetic(operator.sub),
    "*": _arithmetic(operator.mul),
    "/": _divide,
    "//": _int_divide,
    "%": _modulo,
    "**": _power,
    **{symbol: _numeric_compare(func) for symbol, func in COMPARE_FUNCS.items()},
}

STRING_OPERATIONS = {
    "+": _string_op(operator.add, Value.of_string),
    **{symbol: _string_op(func, Value.of_bool) for symbol, func in COMPARE_FUNCS.items()},  # ordinal order
}

TABLE = {}
for _left in NUMERIC:
    for _right in NUMERIC:
        for _symbol, _operation in NUMERIC_OPERATIONS.items():
            TABLE[(_symbol, _left, _right)] = _operation
for _symbol, _operation in STRING_OPERATIONS.items():
    TABLE[(_symbol, ValueKind.STRING, ValueKind.STRING)] = _operation
TABLE[("*", ValueKind.INT, ValueKind.STRING)] = _repeat
TABLE[("*", ValueKind.STRING, ValueKind.INT)] = _repeat


def apply(symbol, left, right):
    """Applies binary operator symbol to Values left and right."""
    try:
        operation = TABLE[(symbol, left.kind, right.kind)]
    except KeyError:
        msg = "unsupported operation '{}' between {} and {}"
        raise UnsupportedOperationError(msg, (symbol, left.kind.value, right.kind.value)) from None

    try:
        result = operation(left, right)
    except (OverflowError, MemoryError):
        raise _out_of_range(symbol) from None
    except ValueError:  # nan reaching math.trunc
        raise SemanticError("math domain error in '{}'", symbol) from None

    if result.kind is ValueKind.INT and result.data.bit_length() > MAX_INT_BITS:
        raise _out_of_range(symbol)
    return result

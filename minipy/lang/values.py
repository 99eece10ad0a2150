"""Runtime values of the minipy language.

A Value is a tagged union: a ValueKind plus the Python object carrying the payload. Values are immutable once
constructed. Composite kinds (list, dict, function) hold a reference to a shared container/node, so copying a Value only
duplicates the handle: two Values built from the same container alias it.

"No value" (the result of an if without a taken branch, of a loop that never ran, ...) is represented by None rather
than by a Value.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ValueKind(Enum):
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    STRING = "str"
    LIST = "list"
    DICT = "dict"
    FUNCTION = "function"


NUMERIC = (ValueKind.INT, ValueKind.FLOAT)
SHARED = (ValueKind.LIST, ValueKind.DICT, ValueKind.FUNCTION)

# ints are arbitrary precision but kept renderable: at most MAX_INT_DIGITS decimal digits
MAX_INT_DIGITS = 4000
MAX_INT_BITS = 13287  # 2 ** 13287 < 10 ** 4000


@dataclass(frozen=True)
class Value:
    kind: ValueKind
    data: Any

    @classmethod
    def of_int(cls, number):
        return cls(ValueKind.INT, int(number))

    @classmethod
    def of_float(cls, number):
        return cls(ValueKind.FLOAT, float(number))

    @classmethod
    def of_bool(cls, flag):
        return cls(ValueKind.BOOL, bool(flag))

    @classmethod
    def of_string(cls, text):
        return cls(ValueKind.STRING, str(text))

    @classmethod
    def of_list(cls, items=None):
        """items is kept by reference (shared), not copied."""
        return cls(ValueKind.LIST, items if items is not None else [])

    @classmethod
    def of_dict(cls, mapping=None):
        """mapping is kept by reference (shared), not copied."""
        return cls(ValueKind.DICT, mapping if mapping is not None else {})

    @classmethod
    def of_function(cls, node):
        return cls(ValueKind.FUNCTION, node)

    @property
    def is_numeric(self):
        return self.kind in NUMERIC

    def truthy(self):
        """Truth value used by if/elif/while conditions."""
        if self.kind in NUMERIC:
            return self.data != 0
        if self.kind is ValueKind.BOOL:
            return self.data
        if self.kind is ValueKind.STRING:
            return len(self.data) > 0
        return self.data is not None

    def render(self):
        """Textual rendering printed by the shell."""
        if self.kind is ValueKind.INT:
            return str(self.data)
        if self.kind is ValueKind.FLOAT:
            return repr(self.data)  # shortest round-trip form, always has a '.' or an exponent
        if self.kind is ValueKind.BOOL:
            return "True" if self.data else "False"
        if self.kind is ValueKind.STRING:
            return f"'{self.data}'"
        if self.kind is ValueKind.LIST:
            return "[...]"
        if self.kind is ValueKind.DICT:
            return "{...}"
        return "<function>"

    def __eq__(self, other):
        if not isinstance(other, Value) or self.kind is not other.kind:
            return False
        if self.kind in SHARED:
            return self.data is other.data
        return self.data == other.data

    def __hash__(self):
        if self.kind in SHARED:
            return hash((self.kind, id(self.data)))
        return hash((self.kind, self.data))

    def __str__(self):
        return self.render()


def render(value):
    """Renders value, or '' for no value."""
    return "" if value is None else value.render()

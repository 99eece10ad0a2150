"""Abstract syntax tree of the minipy language.

The node family is closed: Literal, Variable, Assignment, BinaryOp and Compare are expressions (evaluate -> Value);
If, While, Break and Continue are statements. Every node can be executed, which yields an Outcome: either a normal
value, or a break/continue signal that travels up to the nearest enclosing While. Nodes are frozen dataclasses that
own their children (tuples), so structurally identical trees compare equal.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from minipy.lang.operators import apply as apply_operator
from minipy.lang.values import Value

INDENT = "    "


class Signal(Enum):
    NORMAL = "normal"
    BREAK = "break"
    CONTINUE = "continue"


@dataclass(frozen=True)
class Outcome:
    """Result of executing a node. value is the last value produced (None if there is none)."""
    signal: Signal
    value: Optional[Value] = None

    @classmethod
    def normal(cls, value=None):
        return cls(Signal.NORMAL, value)


def execute_block(statements, env):
    """Executes statements in order. Stops at the first break/continue signal and passes it on, carrying the last value
    produced so far.
    """
    last = None
    for stmt in statements:
        outcome = stmt.execute(env)
        if outcome.value is not None:
            last = outcome.value
        if outcome.signal is not Signal.NORMAL:
            return Outcome(outcome.signal, last)
    return Outcome.normal(last)


def render_block(statements, depth):
    return "".join(stmt.render(depth) + "\n" for stmt in statements)


class Node(ABC):
    """Superclass of every AST node."""

    @abstractmethod
    def execute(self, env):
        """Runs this node against env and returns an Outcome."""

    def render(self, depth=0):
        """Source-like rendering, indented depth levels."""
        return INDENT * depth + str(self)


class Expression(Node):
    """Node that always produces a Value."""

    @abstractmethod
    def evaluate(self, env):
        """Returns the Value of this expression. May mutate env (assignment), never the tree."""

    def execute(self, env):
        return Outcome.normal(self.evaluate(env))


@dataclass(frozen=True)
class Literal(Expression):
    value: Value

    def evaluate(self, env):
        return self.value

    def __str__(self):
        return self.value.render()


@dataclass(frozen=True)
class Variable(Expression):
    name: str

    def evaluate(self, env):
        return env.get(self.name)

    def __str__(self):
        return self.name


@dataclass(frozen=True)
class Assignment(Expression):
    name: str
    value: Expression

    def evaluate(self, env):
        result = self.value.evaluate(env)  # a failing right side never reaches the store
        env.set(self.name, result)
        return result

    def __str__(self):
        return f"{self.name} = {self.value}"


@dataclass(frozen=True)
class BinaryOp(Expression):
    left: Expression
    operator: str
    right: Expression

    def evaluate(self, env):
        left = self.left.evaluate(env)
        right = self.right.evaluate(env)
        return apply_operator(self.operator, left, right)

    def __str__(self):
        return f"({self.left} {self.operator} {self.right})"


@dataclass(frozen=True)
class Compare(Expression):
    """Chained comparison: a < b <= c is (a < b) and (b <= c), with b evaluated once."""
    left: Expression
    operators: Tuple[str, ...]
    rights: Tuple[Expression, ...]

    def evaluate(self, env):
        current = self.left.evaluate(env)
        for symbol, right in zip(self.operators, self.rights):
            following = right.evaluate(env)
            if not apply_operator(symbol, current, following).data:
                return Value.of_bool(False)
            current = following
        return Value.of_bool(True)

    def __str__(self):
        chain = "".join(f" {symbol} {right}" for symbol, right in zip(self.operators, self.rights))
        return f"({self.left}{chain})"


@dataclass(frozen=True)
class If(Node):
    condition: Expression
    body: Tuple[Node, ...]
    elifs: Tuple[Tuple[Expression, Tuple[Node, ...]], ...] = ()
    else_body: Optional[Tuple[Node, ...]] = None

    def execute(self, env):
        if self.condition.evaluate(env).truthy():
            return execute_block(self.body, env)

        for condition, body in self.elifs:
            if condition.evaluate(env).truthy():
                return execute_block(body, env)

        if self.else_body is not None:
            return execute_block(self.else_body, env)
        return Outcome.normal()

    def render(self, depth=0):
        result = f"{INDENT * depth}if {self.condition}:\n" + render_block(self.body, depth + 1)
        for condition, body in self.elifs:
            result += f"{INDENT * depth}elif {condition}:\n" + render_block(body, depth + 1)
        if self.else_body is not None:
            result += f"{INDENT * depth}else:\n" + render_block(self.else_body, depth + 1)
        return result.rstrip("\n")

    def __str__(self):
        return self.render()


@dataclass(frozen=True)
class While(Node):
    condition: Expression
    body: Tuple[Node, ...]
    else_body: Optional[Tuple[Node, ...]] = None

    def execute(self, env):
        last = None
        while self.condition.evaluate(env).truthy():
            outcome = execute_block(self.body, env)
            if outcome.value is not None:
                last = outcome.value
            if outcome.signal is Signal.BREAK:
                return Outcome.normal(last)  # skips the else block

        if self.else_body is not None:
            outcome = execute_block(self.else_body, env)
            if outcome.value is not None:
                last = outcome.value
            if outcome.signal is not Signal.NORMAL:
                return Outcome(outcome.signal, last)  # belongs to an enclosing loop
        return Outcome.normal(last)

    def render(self, depth=0):
        result = f"{INDENT * depth}while {self.condition}:\n" + render_block(self.body, depth + 1)
        if self.else_body is not None:
            result += f"{INDENT * depth}else:\n" + render_block(self.else_body, depth + 1)
        return result.rstrip("\n")

    def __str__(self):
        return self.render()


@dataclass(frozen=True)
class Break(Node):

    def execute(self, env):
        return Outcome(Signal.BREAK)

    def __str__(self):
        return "break"


@dataclass(frozen=True)
class Continue(Node):

    def execute(self, env):
        return Outcome(Signal.CONTINUE)

    def __str__(self):
        return "continue"

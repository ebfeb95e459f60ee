# src/primefam/expreval.py
"""
Range bounds typed on the command line.

    42   1_000_000   1 000 000   1.000.000   0xFF   0b1010
    1e6  2E3         2**20       10**6 - 1   (3 + 4) * 5   1 << 10

Plain literals are tried first; anything else goes through a small AST
evaluator that only knows integer arithmetic. Every accepted bound lies in
[0, U64_MAX].
"""

from __future__ import annotations

import ast
import operator as op
import re

from primefam.utility import U64_MAX, UserInputError

MAX_NODES = 64
MAX_BITS = 128  # intermediate results; the final bound must still fit 64 bits

_NBSP = {0x00A0: " ", 0x2009: " ", 0x202F: " "}   # no-break, thin, narrow no-break
_PLAIN = re.compile(r"[+-]?\d[\d_]*")
_PREFIXED = re.compile(r"[+-]?0[xXbBoO][\da-fA-F_]+")
_GROUPED = re.compile(r"[+-]?\d{1,3}(?:([ ,.])\d{3})(?:\1\d{3})*")  # one separator kind throughout
_EXP_NOTATION = re.compile(r"(?<![\w.])(\d+)[eE]\+?(\d+)(?![\w.])")

_BINOPS = {
    ast.Add: op.add,
    ast.Sub: op.sub,
    ast.Mult: op.mul,
    ast.FloorDiv: op.floordiv,
    ast.Mod: op.mod,
    ast.Pow: op.pow,
    ast.LShift: op.lshift,
    ast.RShift: op.rshift,
}
_UNARY = {ast.UAdd: op.pos, ast.USub: op.neg}


class _NotAnInteger(Exception):
    pass


def _too_big() -> UserInputError:
    return UserInputError(f"Invalid input: value does not fit the 64-bit range 0..{U64_MAX}.")


def _literal(s: str) -> int | None:
    """Integer literal with optional digit grouping, or None."""
    if _PLAIN.fullmatch(s):
        return int(s.replace("_", ""))
    if _PREFIXED.fullmatch(s):
        try:
            return int(s.replace("_", ""), 0)
        except ValueError:
            return None
    if _GROUPED.fullmatch(s):
        return int(re.sub(r"[ ,.]", "", s))
    return None


class _BoundEvaluator(ast.NodeVisitor):
    """Walks an `eval`-mode tree; any node without a visit_ method is rejected."""

    def generic_visit(self, node):
        raise _NotAnInteger(f"unsupported syntax: {type(node).__name__}")

    def visit_Expression(self, node: ast.Expression) -> int:
        return self.visit(node.body)

    def visit_Constant(self, node: ast.Constant) -> int:
        if isinstance(node.value, bool) or not isinstance(node.value, int):
            raise _NotAnInteger("only integer literals are allowed")
        return self._fit(node.value)

    def visit_UnaryOp(self, node: ast.UnaryOp) -> int:
        fn = _UNARY.get(type(node.op))
        if fn is None:
            raise _NotAnInteger(f"unsupported operator: {type(node.op).__name__}")
        return fn(self.visit(node.operand))

    def visit_BinOp(self, node: ast.BinOp) -> int:
        fn = _BINOPS.get(type(node.op))
        if fn is None:
            raise _NotAnInteger(f"unsupported operator: {type(node.op).__name__}")
        left, right = self.visit(node.left), self.visit(node.right)

        if isinstance(node.op, (ast.FloorDiv, ast.Mod)) and right == 0:
            raise _NotAnInteger("division by zero")
        if isinstance(node.op, ast.Pow):
            if right < 0:
                raise _NotAnInteger("negative exponent")
            # size check before computing: |b|^e has about e * log2|b| bits
            if abs(left) > 1 and (abs(left).bit_length() - 1) * right > MAX_BITS:
                raise _too_big()
        if isinstance(node.op, (ast.LShift, ast.RShift)) and not 0 <= right <= MAX_BITS:
            raise _NotAnInteger("shift count out of range")
        return self._fit(fn(left, right))

    @staticmethod
    def _fit(v: int) -> int:
        if abs(v).bit_length() > MAX_BITS:
            raise _too_big()
        return v


def _evaluate(expr: str) -> int:
    expr = _EXP_NOTATION.sub(lambda m: f"({m.group(1)}*10**{m.group(2)})", expr)
    try:
        tree = ast.parse(expr, mode="eval")
    except SyntaxError:
        raise _NotAnInteger("invalid integer expression") from None
    if sum(1 for _ in ast.walk(tree)) > MAX_NODES:
        raise _NotAnInteger("expression too large")
    return _BoundEvaluator().visit(tree)


def parse_bound(text: str) -> int:
    """Parse one range bound; raises UserInputError unless it is an integer in [0, U64_MAX]."""
    s = (text or "").translate(_NBSP).strip()
    n = _literal(s)
    if n is None:
        try:
            n = _evaluate(s)
        except _NotAnInteger as e:
            raise UserInputError(f"Invalid input: '{text}' is not an integer ({e}).") from None
    if not 0 <= n <= U64_MAX:
        raise UserInputError(f"Invalid input: {n} is outside the 64-bit range 0..{U64_MAX}.")
    return n

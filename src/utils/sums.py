from __future__ import annotations


def _check(n: int) -> None:
    if isinstance(n, bool) or not isinstance(n, int):
        raise ValueError("n must be an integer")
    if n < 0:
        raise ValueError("n must be greater than or equal to 0")


def sum_to_n_a(n: int) -> int:
    """Closed form, O(1)."""
    _check(n)
    return n * (n + 1) // 2


def sum_to_n_b(n: int) -> int:
    """Iterative, O(n)."""
    _check(n)
    total = 0
    for i in range(1, n + 1):
        total += i
    return total


def sum_to_n_c(n: int) -> int:
    """Recursive, O(n) time and stack depth; bounded by the interpreter recursion limit."""
    _check(n)
    if n == 0:
        return 0
    return n + sum_to_n_c(n - 1)


__all__ = ["sum_to_n_a", "sum_to_n_b", "sum_to_n_c"]

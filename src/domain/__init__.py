"""Domain models and pure logic for swap quoting and the product catalogue.

Quote math, input validation and the reactive swap form live here and only
consume already-fetched prices, so they can be tested without network or
database access.
"""

__all__ = [
    "pricing",
    "product",
    "swap_form",
    "tokens",
    "validation",
]

"""
Kernel layer.

`bootswap/kernels/python/` contains the integer-only math the engine is built
on. Kernels take no state, never touch the ledger, and fail with
`CheckedArithmeticError` instead of wrapping or truncating.
"""

"""
Pure integer kernels: checked arithmetic, CPMM quotes and LP share math.

Each function is deterministic, takes plain ints and returns ints or a
small frozen result; the engine layers state and ledger effects on top.
"""

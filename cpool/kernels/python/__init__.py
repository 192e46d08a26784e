"""
Production Python kernels.

These modules are designed to be:
- deterministic (integer-only, floor division),
- easy to audit (explicit intermediate variables),
- small surface-area (pure functions, keyword-only arguments).
"""

"""Services Layer: the imperative shell around core/ validation and arithmetic.

Invariants:
    - Every function takes the AsyncSession and the user id explicitly
    - Store calls are wrapped by store_errors(); typed LattErrors propagate unchanged

Design Decisions:
    - One module per workflow for locality (resolver, writer, report, accounts)
"""

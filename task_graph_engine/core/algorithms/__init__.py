"""Graph algorithms over per-query Graph and CapacityMatrix values.

Nothing here holds state between calls; every function reads its inputs and
returns a fresh result.
"""

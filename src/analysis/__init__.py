"""String analysis.

The analysis layer computes the structural properties of a submitted string. Everything here is
pure and deterministic; the same value always yields byte-identical properties.
"""

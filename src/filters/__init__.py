"""Filter derivation and validation.

The filter layer converts either explicit query parameters or a free-text English phrase into a
strict `FilterSpec`, which the SQL builder turns into a parameterized predicate.
"""

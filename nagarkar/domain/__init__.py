"""Domain rules for municipal tax administration.

- **enums**: record statuses and kinds shared by the whole application
- **penalties**: the late payment penalty rule evaluator
- **identifiers**: customer ID and receipt number generation
"""

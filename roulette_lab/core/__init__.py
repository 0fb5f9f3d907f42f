"""Core mathematics and configuration for the Roulette Lab engine.

This package contains the pure building blocks of the table:

- ``wheel``        - outcome domain, colours, uniform draws, house edge
- ``table_config`` - per-variant constants (simulate cap, chips, windows)
- ``layout``       - the full catalog of wagerable spots for a variant
- ``resolver``     - net profit/loss of a bet spread for one outcome

Nothing in this package imports from ``roulette_lab.services``.
All modules are side-effect-free and unit-testable in isolation.
"""

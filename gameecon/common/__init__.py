"""
Shared building blocks for every engine.

- randomness: injectable RandomSource implementations
- clock: injectable Clock implementations
- numeric: clamp and rounding policy helpers
- exceptions: error codes and the EconomyError hierarchy
"""

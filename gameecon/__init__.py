"""
GameEcon. Game Economy Calculation Core.

Architecture:
    gameecon/
    ├── common/          # Injected capabilities (random source, clock), rounding, errors
    ├── schemas/         # Pydantic boundary records and enum sum types
    ├── engine/          # Calculators (achievement, credit, investment, marketplace, ...)
    └── services/        # Engine registry wired from settings

Module Boundaries:
    - Request handlers (not part of this package) validate input, call ONE engine,
      and persist the result
    - Engines never touch storage, never call each other, never read the wall
      clock or a global RNG directly
    - Business rejections are return values, not exceptions

Data Flow:
    Handler → schemas (normalize) → engine (compute) → result dataclass → Handler

Version: 1.0.0
"""

__version__ = "1.0.0"

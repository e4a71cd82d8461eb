"""
Boundary records and enum sum types.

Each record is the single normalization step for its entity: constructing
it fills defaults and rejects malformed values with pydantic.ValidationError,
so engines only ever see fully-populated input.
"""

"""Service wiring for the calculation engines."""

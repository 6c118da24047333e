"""Nesting configuration (stock sheets, units, diagram appearance)."""

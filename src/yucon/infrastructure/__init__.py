"""Infrastructure layer — the unit database and the units.cfg loader.

This layer builds on domain records and the units.cfg grammar.
It must never import from services, commands, or output.
"""

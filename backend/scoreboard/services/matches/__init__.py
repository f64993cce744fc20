"""Match domain services: scoring rules, round ledger and the match lifecycle.

This package holds the rules that decide scores and winners. HTTP routes
import from here, keeping transport concerns separated from the core
match mechanics.
"""

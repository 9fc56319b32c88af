"""Game domain services: tile pool, board analysis, scoring, sessions and the countdown.

This package holds the game rules and the per-table state machine, imported
by socket handlers and REST routes, keeping transport concerns separated
from core game mechanics.
"""

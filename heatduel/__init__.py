"""
Heat Duel - Two-player card duel engine.

Each combatant has hit points and a "heat" resource that scales the
damage they deal. The package provides:
- Deterministic turn resolution (heat, damage, heal, overheat, insert attacks)
- A cancellable turn scheduler
- Bot policies for automated play
- In-memory sessions and a REST API
"""

__version__ = "0.1.0"

"""
Bots module - Automated players.

Provides:
- BotPolicy: Interface for bot decision-making
- FirstAttackPolicy: Plays the first attack card in hand
- FirstLegalPolicy, RandomPolicy: Baselines
"""

from .policy import (
    BotPolicy,
    BotDecision,
    FirstAttackPolicy,
    FirstLegalPolicy,
    RandomPolicy,
    POLICIES,
    create_policy,
)

__all__ = [
    "BotPolicy",
    "BotDecision",
    "FirstAttackPolicy",
    "FirstLegalPolicy",
    "RandomPolicy",
    "POLICIES",
    "create_policy",
]

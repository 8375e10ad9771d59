"""Real-time two-combatant duel simulation engine."""

__version__ = "0.1.0"

"""
Playtest - Drive small text games turn-by-turn with humans or LLM agents.

This package provides:
- A schema-validated action registry per game
- A configurable room-based adventure engine and a resource strategy game
- A uniform game session contract plus human, scripted and LLM players
"""

__version__ = "0.1.0"

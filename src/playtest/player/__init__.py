"""Player adapters and the game driving loop."""

from playtest.player.base import Player, PlayerAction
from playtest.player.human import HumanPlayer, parse_action_line
from playtest.player.llm_player import LLMPlayer, PlayerEvent
from playtest.player.runner import play_game
from playtest.player.scripted import ScriptedPlayer

__all__ = [
    "HumanPlayer",
    "LLMPlayer",
    "Player",
    "PlayerAction",
    "PlayerEvent",
    "ScriptedPlayer",
    "parse_action_line",
    "play_game",
]

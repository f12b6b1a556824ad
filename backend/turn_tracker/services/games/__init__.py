"""Turn/round engine.

Pure turn-order arithmetic lives in ``turn_order``; every other module
here mutates a game inside ``game_transaction`` and broadcasts only
after the commit succeeds. HTTP routes and socket handlers import from
this package and stay free of game rules.
"""

from .admin import create_game, list_games, update_game, rewind_turn, reset_game, rounds_for_game, history_for_game
from .players import create_player, update_player, assign_speaker
from .rounds import start_round, advance_round
from .status import GameStatus, set_status
from .transaction import get_game_or_404, game_transaction
from .turns import record_turn, TURN_ACTIONS

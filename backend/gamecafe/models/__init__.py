from gamecafe.models.board_game import BoardGame
from gamecafe.models.game_comment import GameComment
from gamecafe.models.system_setting import SystemSetting
from gamecafe.models.user import User
from gamecafe.models.user_availability import UserAvailability
from gamecafe.models.user_game_preference import UserGamePreference

__all__ = [
    "BoardGame",
    "GameComment",
    "SystemSetting",
    "User",
    "UserAvailability",
    "UserGamePreference",
]

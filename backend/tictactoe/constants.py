"""Константы игры и протокола."""
from enum import Enum


class GameStatus(str, Enum):
    QUEUE = "queue"
    PLAYING = "playing"
    FINISHED = "finished"


class GamePrivacy(str, Enum):
    PUBLIC = "public"
    PRIVATE = "private"


class GameEndReason(str, Enum):
    WIN = "win"
    DRAW = "draw"
    LEAVE = "leave"
    TIME = "time"


GRID_SIZE = 3
GRID_CELLS = GRID_SIZE * GRID_SIZE
LINE_LENGTH = 3
SEATS = 2

# (dx, dy): горизонталь, вертикаль, две диагонали
LINE_DIRECTIONS: list[tuple[int, int]] = [(1, 0), (0, 1), (1, 1), (1, -1)]

# Типы исходящих сообщений
MSG_SYNC = "sync"
MSG_PUBLIC_PLAYER_COUNT = "public_player_count"
MSG_QUEUE = "queue"

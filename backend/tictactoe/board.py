"""
Определение исхода партии по последнему ходу.
Проверяются только линии, проходящие через последнюю клетку.
"""
from typing import NamedTuple, Sequence

from .constants import GRID_CELLS, GRID_SIZE, LINE_DIRECTIONS, LINE_LENGTH, GameEndReason


class Outcome(NamedTuple):
    reason: GameEndReason
    winner: int | None


def _run_length(grid: Sequence[int | None], x: int, y: int, dx: int, dy: int) -> int:
    """Сколько подряд клеток того же игрока в направлении (dx, dy), не считая (x, y)."""
    seat = grid[y * GRID_SIZE + x]
    count = 0
    x, y = x + dx, y + dy
    while 0 <= x < GRID_SIZE and 0 <= y < GRID_SIZE and grid[y * GRID_SIZE + x] == seat:
        count += 1
        x, y = x + dx, y + dy
    return count


def evaluate(grid: Sequence[int | None], last_move: int) -> Outcome | None:
    """
    Проверяет, закончил ли ход в клетку last_move партию.
    Возвращает Outcome(WIN, seat), Outcome(DRAW, None) или None, если игра продолжается.
    Вызывается только после того, как ход записан в grid.
    """
    if len(grid) != GRID_CELLS:
        raise ValueError(f"grid must have {GRID_CELLS} cells, got {len(grid)}")
    if not 0 <= last_move < GRID_CELLS:
        raise ValueError(f"cell index out of range: {last_move}")
    seat = grid[last_move]
    if seat is None:
        raise ValueError(f"cell {last_move} is empty")

    x, y = last_move % GRID_SIZE, last_move // GRID_SIZE
    for dx, dy in LINE_DIRECTIONS:
        run = 1 + _run_length(grid, x, y, dx, dy) + _run_length(grid, x, y, -dx, -dy)
        if run >= LINE_LENGTH:
            return Outcome(GameEndReason.WIN, seat)

    if all(cell is not None for cell in grid):
        return Outcome(GameEndReason.DRAW, None)
    return None

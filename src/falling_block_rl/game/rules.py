from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ScoringRules:
    points_per_line: int = 100

    def score_for_lines(self, lines: int) -> int:
        if lines <= 0:
            return 0
        return self.points_per_line * lines


class ScoreTracker:
    """Running score plus placement counters. Only ever grows until reset."""

    def __init__(self, rules: ScoringRules | None = None) -> None:
        self.rules = rules or ScoringRules()
        self.score = 0
        self.lines_cleared_total = 0
        self.pieces_placed = 0

    def add_lines(self, lines: int) -> int:
        gained = self.rules.score_for_lines(lines)
        self.score += gained
        self.lines_cleared_total += max(0, lines)
        self.pieces_placed += 1
        return gained

    def reset(self) -> None:
        self.score = 0
        self.lines_cleared_total = 0
        self.pieces_placed = 0

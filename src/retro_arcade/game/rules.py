from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ScoringRules:
    line_clear_scores: tuple[int, ...] = (0, 100, 300, 500, 800)
    placement_points: int = 10
    hard_drop_points: int = 2
    lines_per_level: int = 10
    base_drop_speed: int = 1000
    drop_speed_step: int = 100
    min_drop_speed: int = 50

    def score_for_lines(self, lines: int, level: int) -> int:
        if 0 <= lines < len(self.line_clear_scores):
            return self.line_clear_scores[lines] * level
        return 0

    def placement_score(self, level: int) -> int:
        return self.placement_points * level

    def hard_drop_score(self, distance: int) -> int:
        return self.hard_drop_points * distance

    def level_for_lines(self, total_lines: int) -> int:
        return total_lines // self.lines_per_level + 1

    def drop_speed_for_level(self, level: int) -> int:
        return max(self.min_drop_speed, self.base_drop_speed - (level - 1) * self.drop_speed_step)

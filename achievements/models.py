# achievements/models.py

from dataclasses import dataclass
from typing import List

from .criteria import Clause


@dataclass(frozen=True)
class Achievement:
    id: int
    name: str
    description: str
    disabled: bool
    criteria: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "disabled": self.disabled,
            "criteria": self.criteria,
        }


@dataclass(frozen=True)
class CompiledAchievement:
    achievement: Achievement
    clauses: List[Clause]

    @property
    def id(self) -> int:
        return self.achievement.id

    @property
    def name(self) -> str:
        return self.achievement.name


@dataclass(frozen=True)
class NewUnlock:
    viewer_user_id: str
    achievement_id: int
    achievement_name: str
    unlocked_at_ms: int

    def to_dict(self) -> dict:
        return {
            "viewerUserId": self.viewer_user_id,
            "achievementId": self.achievement_id,
            "achievementName": self.achievement_name,
            "unlockedAtMs": self.unlocked_at_ms,
        }

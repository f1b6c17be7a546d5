"""
Request/response models for the achievements API.
"""

from typing import List, Optional, Union

from pydantic import BaseModel

Number = Union[int, float]


class AchievementOut(BaseModel):
    id: int
    name: str
    description: str = ""
    disabled: bool = False
    criteria: str


class AchievementListResponse(BaseModel):
    ok: bool = True
    achievements: List[AchievementOut]


class UnlockedAchievementOut(BaseModel):
    achievementId: int
    unlockedAtMs: int
    name: str
    description: str = ""


class MyAchievementsResponse(BaseModel):
    ok: bool = True
    viewerUserId: str
    achievements: List[UnlockedAchievementOut]


class NewUnlockOut(BaseModel):
    viewerUserId: str
    achievementId: int
    achievementName: str
    unlockedAtMs: int


class RecordActionResponse(BaseModel):
    ok: bool
    skipped: bool = False
    reason: Optional[str] = None
    viewerUserId: Optional[str] = None
    actionKey: Optional[str] = None
    count: Optional[int] = None
    atMs: Optional[int] = None
    achievementsUnlocked: List[NewUnlockOut] = []


class ValidateCriteriaRequest(BaseModel):
    criteria: str = ""


class ClauseOut(BaseModel):
    metric: str
    op: str
    threshold: Number


class ValidateCriteriaResponse(BaseModel):
    ok: bool = True
    clauses: List[ClauseOut]
    warnings: List[str] = []


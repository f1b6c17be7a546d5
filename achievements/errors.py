# achievements/errors.py


class AchievementError(Exception):
    code = "achievement_error"

    def __init__(self, message: str = ""):
        super().__init__(message or self.code)
        self.message = message or self.code


class CriteriaRequired(AchievementError):
    code = "criteria_required"


class InvalidCriteria(AchievementError):
    code = "invalid_criteria"


class InvalidViewerId(AchievementError):
    code = "missing_viewer_user_id"


class StorageUninitialized(AchievementError):
    """Achievement tables are missing (migrations have not been applied yet)."""

    code = "db_not_initialized"

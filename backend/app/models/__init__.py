from app.models.user import User, UserRole
from app.models.influencer import Influencer, InfluencerNote, Platform, InfluencerStatus
from app.models.import_batch import ImportBatch, ImportRowError

__all__ = [
    "User",
    "UserRole",
    "Influencer",
    "InfluencerNote",
    "Platform",
    "InfluencerStatus",
    "ImportBatch",
    "ImportRowError",
]

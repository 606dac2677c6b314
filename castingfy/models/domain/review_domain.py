from datetime import datetime

from pydantic import BaseModel

MIN_RATING = 1
MAX_RATING = 5
ANONYMOUS_REVIEWER = "Anonymous"


class Review(BaseModel):
    id: str
    talent_user_id: str
    reviewer_user_id: str
    rating: int
    review_text: str
    project_name: str | None = None
    created_at: datetime | None = None
    reviewer_name: str | None = None

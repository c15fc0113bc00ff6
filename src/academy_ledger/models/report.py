from uuid import UUID

from pydantic import BaseModel


class CounterpartLessonCount(BaseModel):
    """
    Raw activity count of lessons between an anchor user and one counterpart.
    Counts every lesson regardless of attendance; not a financial figure.
    """
    counterpart_id: UUID
    name: str
    lesson_count: int

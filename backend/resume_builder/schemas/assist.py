from pydantic import Field, field_validator

from resume_builder.schemas.common import CamelModel
from resume_builder.services.feedback_service import FEEDBACK_CATEGORIES


class InterviewQuestionsRequest(CamelModel):
    position: str
    experience: str | None = None
    skills: str | None = None

    @field_validator("position")
    @classmethod
    def check_position(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("position must not be blank")
        return value


class InterviewQuestion(CamelModel):
    id: int
    category: str
    question: str
    tips: str


class InterviewQuestionsResponse(CamelModel):
    questions: list[InterviewQuestion]


class FeedbackRequest(CamelModel):
    rating: int = Field(ge=1, le=5)
    category: str
    feedback: str = Field(max_length=1000)
    email: str | None = None
    timestamp: str | None = None

    @field_validator("category")
    @classmethod
    def check_category(cls, value: str) -> str:
        if value not in FEEDBACK_CATEGORIES:
            raise ValueError(f"category must be one of {', '.join(FEEDBACK_CATEGORIES)}")
        return value

    @field_validator("feedback")
    @classmethod
    def check_feedback(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("feedback must not be blank")
        return value


class FeedbackResponse(CamelModel):
    success: bool = True
    feedback_id: str

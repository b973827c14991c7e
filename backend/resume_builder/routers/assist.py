from fastapi import APIRouter, Depends, HTTPException

from resume_builder.config import settings
from resume_builder.dependencies import get_store
from resume_builder.exceptions import StoreError
from resume_builder.schemas.assist import (
    FeedbackRequest,
    FeedbackResponse,
    InterviewQuestionsRequest,
    InterviewQuestionsResponse,
)
from resume_builder.services.feedback_service import submit_feedback
from resume_builder.services.interview_service import generate_questions
from resume_builder.services.kv_store import KeyValueStore

router = APIRouter(tags=["assist"])


@router.post("/interview-questions", response_model=InterviewQuestionsResponse)
async def interview_questions(req: InterviewQuestionsRequest):
    questions = generate_questions(
        req.position,
        experience=req.experience,
        skills=req.skills,
        limit=settings.interview_question_limit,
    )
    return InterviewQuestionsResponse(questions=questions)


@router.post("/feedback", response_model=FeedbackResponse)
async def feedback(req: FeedbackRequest, store: KeyValueStore = Depends(get_store)):
    try:
        feedback_id = submit_feedback(
            store,
            rating=req.rating,
            category=req.category,
            feedback=req.feedback,
            email=req.email,
            timestamp=req.timestamp,
        )
    except StoreError:
        raise HTTPException(status_code=500, detail="Failed to submit feedback")
    return FeedbackResponse(feedback_id=feedback_id)

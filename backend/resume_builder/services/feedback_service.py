import json
import logging
import uuid

from resume_builder.services.kv_store import KeyValueStore
from resume_builder.utils.timestamps import utc_now_iso

logger = logging.getLogger("resume_builder.feedback")

FEEDBACK_CATEGORIES = ("general", "feature-request", "bug-report", "improvement")


def feedback_key(feedback_id: str) -> str:
    return f"feedback:{feedback_id}"


def submit_feedback(
    store: KeyValueStore,
    rating: int,
    category: str,
    feedback: str,
    email: str | None = None,
    timestamp: str | None = None,
) -> str:
    """Store one feedback entry and return its id. Inputs are validated by the request schema."""
    feedback_id = f"fb_{uuid.uuid4().hex}"
    record = {
        "id": feedback_id,
        "rating": rating,
        "category": category,
        "feedback": feedback,
        "email": email or None,
        "timestamp": timestamp or utc_now_iso(),
        "receivedAt": utc_now_iso(),
    }
    store.set(feedback_key(feedback_id), json.dumps(record))
    logger.info("Feedback stored: %s (%s, rating %d)", feedback_id, category, rating)
    return feedback_id

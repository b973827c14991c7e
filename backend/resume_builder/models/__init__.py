from resume_builder.models.kv import KeyValue
from resume_builder.models.user import User

__all__ = ["KeyValue", "User"]

from sqlalchemy import Column, Text
from resume_builder.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Text, primary_key=True)
    email = Column(Text, nullable=False, unique=True)
    password_hash = Column(Text, nullable=False)
    full_name = Column(Text)
    created_at = Column(Text, nullable=False)

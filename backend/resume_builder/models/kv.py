from sqlalchemy import Column, Text
from resume_builder.database import Base


class KeyValue(Base):
    __tablename__ = "kv_store"

    key = Column(Text, primary_key=True)
    value = Column(Text, nullable=False)

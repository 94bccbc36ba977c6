"""
Activity model - suggestion content shown on pages (not user-owned)
"""

from sqlalchemy import Column, String, Integer, Text
from prasempre.utils.database import Base


class Activity(Base):
    __tablename__ = "activities"

    id = Column(String(64), primary_key=True)
    type = Column(String(20), nullable=False, index=True)  # couple | friends | pet
    title = Column(String(200), nullable=False)
    prompt = Column(Text, nullable=False)
    category = Column(String(50))
    emoji = Column(String(16))
    duration = Column(Integer)  # minutes

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "prompt": self.prompt,
            "category": self.category,
            "emoji": self.emoji,
            "duration": self.duration,
        }

    def __repr__(self):
        return f"<Activity(id='{self.id}', type='{self.type}', title='{self.title}')>"

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Index, String, Text

from recipe_api.recipes.db import Base


def new_recipe_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Recipe(Base):
    """
    A recipe for a dish.
    """

    __tablename__ = "recipes"

    id = Column(String(36), primary_key=True, default=new_recipe_id)

    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False)

    # freeform text, not structured lists
    ingredients = Column(Text, nullable=False)
    steps = Column(Text, nullable=False)

    image_url = Column(Text, nullable=False, default="")

    # ordering key for listings; not part of the API
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    __table_args__ = (Index("ix_recipes_created_at", "created_at"),)


recipes_table = Recipe.__table__

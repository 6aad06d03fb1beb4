import uuid

from sqlalchemy import Column, Index, String, Text, Uuid, func

from catalog.core.db import Base
from catalog.core.model_mixins import TimestampMixin


class Genre(Base, TimestampMixin):
    __tablename__ = "genres"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(100), nullable=False)
    slug = Column(String(120), nullable=True, unique=True)


class Creator(Base, TimestampMixin):
    """Tác giả, họa sĩ, studio... có thể gắn vào series với một vai trò."""

    __tablename__ = "creators"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)


class Character(Base, TimestampMixin):
    __tablename__ = "characters"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    image_url = Column(String(1000), nullable=True)


# Tên là duy nhất, không phân biệt hoa thường
Index("uq_genres_name_lower", func.lower(Genre.name), unique=True)
Index("uq_creators_name_lower", func.lower(Creator.name), unique=True)
Index("uq_characters_name_lower", func.lower(Character.name), unique=True)

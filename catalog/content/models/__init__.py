from catalog.content.models.taxonomy import Character, Creator, Genre
from catalog.content.models.series import (
    Series,
    SeriesCharacter,
    SeriesCreator,
    SeriesGenre,
)
from catalog.content.models.volume import Volume
from catalog.content.models.chapter import Chapter
from catalog.content.models.commerce import ContentPurchase, ContentRental

__all__ = [
    "Character",
    "Creator",
    "Genre",
    "Series",
    "SeriesCharacter",
    "SeriesCreator",
    "SeriesGenre",
    "Volume",
    "Chapter",
    "ContentPurchase",
    "ContentRental",
]

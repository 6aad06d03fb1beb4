from catalog.content.schemas.common import ActorContext, PartialUpdate
from catalog.content.schemas.series import (
    CreatorAssignment,
    SeriesCreate,
    SeriesResponse,
    SeriesUpdate,
)
from catalog.content.schemas.volume import VolumeCreate, VolumeResponse, VolumeUpdate
from catalog.content.schemas.chapter import (
    ChapterCreate,
    ChapterPublish,
    ChapterResponse,
    ChapterUpdate,
)
from catalog.content.schemas.listing import SeriesListParams, SeriesSummary
from catalog.content.schemas.detail import (
    CharacterRef,
    CreatorRef,
    GenreRef,
    OwnerRef,
    OwnerSummary,
    SeriesFullDetail,
    SeriesStats,
)
from catalog.content.schemas.taxonomy import (
    CharacterCreate,
    CharacterResponse,
    CharacterUpdate,
    CreatorCreate,
    CreatorResponse,
    CreatorUpdate,
    GenreCreate,
    GenreResponse,
    GenreUpdate,
)

from enum import Enum


class SeriesStatus(str, Enum):
    DRAFT = "DRAFT"
    ONGOING = "ONGOING"
    COMPLETED = "COMPLETED"
    HIATUS = "HIATUS"


class AgeRating(str, Enum):
    G = "G"
    PG = "PG"
    PG_13 = "PG-13"
    R = "R"
    NC_17 = "NC-17"


class OwnershipType(str, Enum):
    PERSONAL = "PERSONAL"
    TENANT = "TENANT"
    COLLABORATIVE = "COLLABORATIVE"


class AccessLevel(str, Enum):
    PRIVATE = "PRIVATE"
    TENANT_ONLY = "TENANT_ONLY"
    PUBLIC = "PUBLIC"


class CreatorRole(str, Enum):
    AUTHOR = "AUTHOR"
    ILLUSTRATOR = "ILLUSTRATOR"
    ARTIST = "ARTIST"
    STUDIO = "STUDIO"
    VOICE_ACTOR = "VOICE_ACTOR"


class ContentNodeType(str, Enum):
    """Loại nút nội dung, dùng làm item_type trong sổ giao dịch mua/thuê."""

    SERIES = "SERIES"
    VOLUME = "VOLUME"
    CHAPTER = "CHAPTER"


class OwnerKind(str, Enum):
    INDIVIDUAL = "individual"
    ORGANIZATION = "organization"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


# Số từ đọc được mỗi phút khi ước tính thời gian đọc
READING_WORDS_PER_MINUTE = 200

SLUG_MAX_LENGTH = 255

SERIES_SORT_FIELDS = (
    "title",
    "created_at",
    "updated_at",
    "published_at",
    "view_count",
    "rating_average",
    "latest_chapter_updated_at",
)

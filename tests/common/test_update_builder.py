import pytest

from catalog.common.db.update_builder import UpdateBuilder
from catalog.core.constants import SeriesStatus
from catalog.core.exceptions import ErrorKind, NoFieldsProvidedException
from catalog.content.models import Chapter, Series
from catalog.content.schemas.chapter import ChapterUpdate
from catalog.content.schemas.series import ASSOCIATION_FIELDS, SeriesUpdate


def _set_clause(statement) -> str:
    sql = str(statement.compile())
    return sql.split(" SET ", 1)[1].split(" WHERE ", 1)[0]


def test_present_fields_follow_declaration_order():
    # Thứ tự truyền vào khác thứ tự khai báo của schema
    request = ChapterUpdate(title="New title", chapter_number=4)

    builder = UpdateBuilder(Chapter, "chapter").set_present(request)

    assert builder.columns == ["chapter_number", "title"]


def test_build_appends_updated_at_last():
    builder = UpdateBuilder(Chapter, "chapter").set_present(
        ChapterUpdate(title="x", chapter_number=2)
    )

    clause = _set_clause(builder.build())
    columns = [part.split("=")[0].strip() for part in clause.split(",")]

    assert columns == ["chapter_number", "title", "updated_at"]


def test_absent_and_null_fields_are_distinguished():
    request = SeriesUpdate(cover_image=None)

    builder = UpdateBuilder(Series, "series").set_present(request)

    assert builder.assignments == [("cover_image", None)]


def test_excluded_fields_are_skipped():
    request = SeriesUpdate(title="T", genre_ids=[])

    builder = UpdateBuilder(Series, "series").set_present(
        request, exclude=ASSOCIATION_FIELDS
    )

    assert builder.columns == ["title"]


def test_enum_values_are_unwrapped_and_reassignment_keeps_position():
    builder = UpdateBuilder(Series, "series")
    builder.set("status", SeriesStatus.ONGOING).set("title", "A")
    builder.set("status", "HIATUS")

    assert builder.assignments == [("status", "HIATUS"), ("title", "A")]


def test_empty_builder_raises_no_fields_provided():
    builder = UpdateBuilder(Series, "series").set_present(SeriesUpdate())

    with pytest.raises(NoFieldsProvidedException) as exc_info:
        builder.build(entity_id="abc")

    assert exc_info.value.kind == ErrorKind.NO_FIELDS_PROVIDED
    assert exc_info.value.entity_type == "series"


def test_touch_only_build_when_changes_not_required():
    statement = UpdateBuilder(Series, "series").build(require_changes=False)

    assert _set_clause(statement).strip().startswith("updated_at")

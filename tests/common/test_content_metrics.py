import math

from catalog.common.utils.content_metrics import (
    EMPTY_METRICS,
    calculate_content_metrics,
    serialize_content,
)


def test_metrics_of_absent_content_are_zero():
    assert calculate_content_metrics(None) == EMPTY_METRICS


def test_metrics_count_serialized_document():
    content = {"text": "hello world"}
    serialized = serialize_content(content)

    metrics = calculate_content_metrics(content)

    assert serialized == '{"text":"hello world"}'
    assert metrics.word_count == 2
    assert metrics.character_count == len(serialized)
    assert metrics.reading_time_minutes == 1


def test_character_count_uses_code_points():
    metrics = calculate_content_metrics({"t": "héllo"})

    assert metrics.character_count == len('{"t":"héllo"}')


def test_reading_time_rounds_up():
    content = {"t": " ".join(["w"] * 400)}

    metrics = calculate_content_metrics(content)

    assert metrics.word_count == 400
    assert metrics.reading_time_minutes == math.ceil(400 / 200)


def test_metrics_of_empty_string_document():
    # Chuỗi rỗng vẫn là một document: '""' có 2 ký tự và 1 token
    metrics = calculate_content_metrics("")

    assert metrics.character_count == 2
    assert metrics.word_count == 1

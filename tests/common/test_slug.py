from catalog.common.utils.slug import generate_slug


def test_generate_slug_basic():
    assert generate_slug("Hello, World!") == "hello-world"


def test_generate_slug_collapses_separators():
    slug = generate_slug("  Many   spaces -- and___symbols  ")

    assert slug == "many-spaces-and-symbols"


def test_generate_slug_transliterates_unicode():
    assert generate_slug("Đắc Nhân Tâm") == "dac-nhan-tam"


def test_generate_slug_respects_max_length():
    slug = generate_slug("word " * 200)

    assert len(slug) <= 255
    assert not slug.endswith("-")

import datetime

import pydantic
import pytest

from blogindex.exceptions import ValidationError
from blogindex.schemas.post import LoadResult, Post, parse_date


def _post(**overrides):
    data = {
        "slug": "liskov",
        "pubDate": "2025-11-30",
        "author": "Jane Writer",
        "title": "Liskov Substitution",
        "description": "The L in SOLID",
        "image": {"url": "/images/lsp.png", "alt": "Ducks"},
        "tags": [" solid ", "solid", "", None, 2025],
    }
    data.update(overrides)
    return Post.model_validate(data)


def test_post_normalizes_tags():
    assert _post().tags == frozenset({"solid", "2025"})


def test_post_is_immutable():
    post = _post()

    with pytest.raises(pydantic.ValidationError):
        post.title = "changed"


def test_post_requires_front_matter_key_for_publish_date():
    data = {**_post().model_dump(), "publishDate": datetime.date(2025, 1, 1)}

    with pytest.raises(pydantic.ValidationError) as exc_info:
        Post.model_validate(data)

    assert exc_info.value.errors()[0]["loc"] == ("pubDate",)


def test_post_rejects_null_tags():
    with pytest.raises(pydantic.ValidationError):
        _post(tags=None)


def test_parse_date_truncates_datetimes():
    value = datetime.datetime(2026, 1, 19, 23, 59)

    assert parse_date(value) == datetime.date(2026, 1, 19)


@pytest.mark.parametrize("value", ["", "2025-13-01", "yesterday", 20251130])
def test_parse_date_rejects_garbage(value):
    with pytest.raises(ValueError):
        parse_date(value)


def test_load_result_reports_errors():
    error = ValidationError("bad.md", "pubDate", "Field required")
    result = LoadResult(posts=(_post(),), errors=(error,))

    assert not result.ok
    assert len(result) == 1
    assert [post.slug for post in result] == ["liskov"]
    assert error.problems == (("pubDate", "Field required"),)

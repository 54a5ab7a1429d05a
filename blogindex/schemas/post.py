import datetime
import enum
from dataclasses import dataclass, field
from typing import Annotated, FrozenSet, Iterator, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, field_validator

from blogindex.exceptions import PostLoaderError

# Month-name forms commonly written by hand in front-matter ("Nov 30 2025").
_DATE_FORMATS = ("%b %d %Y", "%B %d %Y", "%b %d, %Y", "%B %d, %Y")

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class ErrorPolicy(str, enum.Enum):
    ABORT = "abort"
    SKIP = "skip"


def parse_date(value) -> datetime.date:
    """Coerce a front-matter date value into a calendar date."""
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValueError("expected a date")

    text = value.strip()
    try:
        return datetime.datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            return datetime.datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise ValueError(f"unparseable date {text!r}")


class PostImage(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: NonEmptyStr
    alt: str


class Post(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    slug: NonEmptyStr
    publishDate: datetime.date = Field(alias="pubDate")
    updatedDate: Optional[datetime.date] = None
    author: str
    title: str
    description: str
    image: PostImage
    tags: FrozenSet[str]
    draft: bool = False
    readingTime: str = "1 min"
    body: str = ""

    @field_validator("publishDate", mode="before")
    @classmethod
    def _coerce_publish_date(cls, value):
        return parse_date(value)

    @field_validator("updatedDate", mode="before")
    @classmethod
    def _coerce_updated_date(cls, value):
        if value is None:
            return None
        return parse_date(value)

    @field_validator("tags", mode="before")
    @classmethod
    def _normalize_tags(cls, value):
        if isinstance(value, str):
            value = [value]
        if isinstance(value, (list, tuple, set, frozenset)):
            cleaned = (str(item).strip() for item in value if item is not None)
            return frozenset(tag for tag in cleaned if tag)
        return value


@dataclass(frozen=True)
class LoadResult:
    """Outcome of one batch load: ordered posts plus per-document failures."""

    posts: Tuple[Post, ...] = ()
    errors: Tuple[PostLoaderError, ...] = field(default=())

    @property
    def ok(self) -> bool:
        return not self.errors

    def __iter__(self) -> Iterator[Post]:
        return iter(self.posts)

    def __len__(self) -> int:
        return len(self.posts)

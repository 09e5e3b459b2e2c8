from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union
from datetime import datetime

# Either a plain string or a mapping from language code to text.
LocalizedText = Union[str, Dict[str, Optional[str]]]


class Post(BaseModel):
    """A gallery post as it travels over the wire and through the repositories."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: LocalizedText = ""
    description: LocalizedText = ""
    image_url: str = Field("", alias="imageUrl")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("image_url", mode="before")
    @classmethod
    def _empty_image(cls, value: Any) -> Any:
        return value or ""

    def to_response(self) -> dict:
        """Serialize with the camelCase keys the site scripts expect."""
        return self.model_dump(by_alias=True, mode="json")


class ImportedPost(BaseModel):
    """A post supplied to the bulk import endpoint. Its id, if any, is ignored."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: LocalizedText = ""
    description: LocalizedText = ""
    image_url: Optional[str] = Field(None, alias="imageUrl")
    created_at: Optional[datetime] = Field(None, alias="createdAt")


class ImportRequest(BaseModel):
    posts: List[ImportedPost] = []


class ImportResponse(BaseModel):
    ok: bool = True
    imported: int


def next_numeric_id(ids: Iterable[str]) -> str:
    """One past the largest numeric id, as a string. Non-numeric ids count as 0."""
    highest = 0
    for value in ids:
        try:
            highest = max(highest, int(value))
        except (TypeError, ValueError):
            continue
    return str(highest + 1)


def parse_posts(items: Any) -> Tuple[List[Post], int]:
    """Validate a post list item by item.

    Returns the valid posts and the number of entries skipped. Anything other
    than a list raises ValueError.
    """
    if not isinstance(items, list):
        raise ValueError(f"Expected a list of posts, got {type(items).__name__}")
    posts: List[Post] = []
    skipped = 0
    for item in items:
        try:
            posts.append(Post.model_validate(item))
        except ValidationError:
            skipped += 1
    return posts, skipped

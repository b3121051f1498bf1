"""Catalogue product — a read-only snapshot of a third-party listing."""

from pydantic import BaseModel, ConfigDict, Field


class Rating(BaseModel):
    model_config = ConfigDict(frozen=True)

    rate: float = 0.0
    count: int = 0


class Product(BaseModel):
    """A product as the storefront shows it. Fetched, never mutated."""

    model_config = ConfigDict(frozen=True)

    id: int | str
    title: str
    price: float = Field(ge=0)
    category: str = ""
    image: str | None = None
    description: str = ""
    rating: Rating = Field(default_factory=Rating)

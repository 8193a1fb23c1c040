"""NASA news models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class NewsArticle(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str = "Untitled"
    link: str = "#"
    date: str = ""
    excerpt: str = ""


class NewsDigest(BaseModel):
    model_config = ConfigDict(frozen=True)

    articles: tuple[NewsArticle, ...] = ()

    @property
    def count(self) -> int:
        return len(self.articles)

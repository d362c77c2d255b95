from __future__ import annotations


class Book:
    """Represents a single title in the catalog and how many copies are on the shelf."""

    def __init__(self, title: str, copies: int = 0) -> None:
        self.title = title.strip()
        self.copies = copies

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        return f"{self.title} ({self.copies} copies)"

    def __repr__(self) -> str:
        return f"Book(title={self.title!r}, copies={self.copies!r})"

    @property
    def is_available(self) -> bool:
        return self.copies > 0

    def to_dict(self) -> dict:
        return {"title": self.title, "copies": self.copies}

    @staticmethod
    def from_dict(data: dict) -> "Book":
        return Book(title=data["title"], copies=int(data.get("copies", 0)))

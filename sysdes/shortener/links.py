"""Short links and the accounts that create them."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta

_DEFAULT_LIFETIME = timedelta(days=365)
_YES_NO = {True: "Yes", False: "No"}


@dataclass(eq=False)
class URL:
    """A shortened link; it expires a year after creation unless changed."""

    original_url: str
    short_code: str
    creator: User | None = field(default=None, repr=False)
    title: str = ""
    description: str = ""
    created_at: datetime = field(default_factory=datetime.now)
    expires_at: datetime | None = None
    is_active: bool = True
    click_count: int = 0

    def __post_init__(self) -> None:
        if self.expires_at is None:
            self.expires_at = self.created_at + _DEFAULT_LIFETIME

    def increment_clicks(self) -> None:
        self.click_count += 1

    def is_expired(self) -> bool:
        return datetime.now() > self.expires_at

    def full_short_url(self, base_url: str) -> str:
        return f"{base_url}/{self.short_code}"

    def describe(self) -> str:
        lines = [
            "URL Details:",
            f"  Original URL: {self.original_url}",
            f"  Short Code: {self.short_code}",
            f"  Title: {self.title}",
            f"  Description: {self.description}",
            f"  Created: {self.created_at.ctime()}",
            f"  Expires: {self.expires_at.ctime()}",
            f"  Active: {_YES_NO[bool(self.is_active)]}",
            f"  Click Count: {self.click_count}",
            f"  Expired: {_YES_NO[self.is_expired()]}",
        ]
        if self.creator is not None:
            lines.append(f"  Creator: {self.creator.username}")
        return "\n".join(lines) + "\n"


@dataclass(eq=False)
class User:
    """An account that owns short links."""

    username: str
    email: str
    password_hash: str = field(repr=False)
    created_at: datetime = field(default_factory=datetime.now)
    last_login_at: datetime | None = None
    is_active: bool = True
    created_urls: list[URL] = field(default_factory=list, repr=False)
    user_id: str = ""

    def __post_init__(self) -> None:
        if not self.user_id:
            self.user_id = f"user_{self.username}_{int(self.created_at.timestamp())}"
        if self.last_login_at is None:
            self.last_login_at = self.created_at

    def add_created_url(self, url: URL) -> None:
        """Remember ``url`` unless one with the same short code is already held."""
        if all(existing.short_code != url.short_code for existing in self.created_urls):
            self.created_urls.append(url)

    def remove_created_url(self, short_code: str) -> None:
        self.created_urls = [u for u in self.created_urls if u.short_code != short_code]

    def total_urls_created(self) -> int:
        return len(self.created_urls)

    def total_clicks(self) -> int:
        return sum(u.click_count for u in self.created_urls)

    def describe(self) -> str:
        lines = [
            "User Details:",
            f"  User ID: {self.user_id}",
            f"  Username: {self.username}",
            f"  Email: {self.email}",
            f"  Created: {self.created_at.ctime()}",
            f"  Last Login: {self.last_login_at.ctime()}",
            f"  Active: {_YES_NO[bool(self.is_active)]}",
            f"  URLs Created: {self.total_urls_created()}",
            f"  Total Clicks: {self.total_clicks()}",
        ]
        return "\n".join(lines) + "\n"
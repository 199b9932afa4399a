"""The link-shortening service: creation, expansion, accounts and reports."""

from __future__ import annotations

import hashlib
import re
from dataclasses import dataclass
from datetime import datetime, timedelta

from sysdes.shortener.analytics import Analytics, UrlStats
from sysdes.shortener.codes import CHARACTERS, MAX_CUSTOM_LENGTH, HashGenerator
from sysdes.shortener.links import URL, User
from sysdes.shortener.store import Database

_URL_PATTERN = re.compile(r"(https?://)?[\da-z.-]+\.[a-z.]{2,6}[/\w .-]*/?", re.ASCII)


def _hash_password(password: str) -> str:
    return hashlib.sha256(password.encode("utf-8")).hexdigest()


def _expiry(days: int) -> datetime:
    return datetime.now() + timedelta(hours=24 * days)


@dataclass
class ShortenRequest:
    """What to shorten and how."""

    original_url: str
    custom_code: str = ""
    title: str = ""
    description: str = ""
    user_id: str = ""
    expiration_days: int = 0


@dataclass
class ShortenResponse:
    """The outcome of a shortening request."""

    success: bool
    short_code: str = ""
    short_url: str = ""
    message: str = ""
    url: URL | None = None


class URLShortener:
    """Ties together storage, code generation and click analytics."""

    def __init__(self, base_url: str = "http://short.url") -> None:
        self.base_url = base_url
        self.database = Database()
        self.hash_generator = HashGenerator()
        self.analytics = Analytics()

    # Shortening

    def shorten(self, request: ShortenRequest) -> ShortenResponse:
        if not self.is_valid_url(request.original_url):
            return ShortenResponse(False, message="Invalid URL format")
        sanitized = self.sanitize_url(request.original_url)

        user = None
        if request.user_id:
            user = self.database.get_user(request.user_id)
            if user is None:
                return ShortenResponse(False, message="User not found")

        if request.custom_code:
            if not self.is_valid_custom_code(request.custom_code):
                return ShortenResponse(False, message="Invalid custom code format")
            if self.database.url_exists(request.custom_code):
                return ShortenResponse(False, message="Custom code already exists")
            short_code = request.custom_code
            self.hash_generator.add_used_code(short_code)
        else:
            short_code = self.hash_generator.generate_short_code()

        url = URL(sanitized, short_code, user)
        if request.title:
            url.title = request.title
        if request.description:
            url.description = request.description
        if request.expiration_days > 0:
            url.expires_at = _expiry(request.expiration_days)

        if not self.database.add_url(url):
            return ShortenResponse(False, message="Failed to store URL")
        return ShortenResponse(
            True,
            short_code=short_code,
            short_url=url.full_short_url(self.base_url),
            message="URL shortened successfully",
            url=url,
        )

    def shorten_url(self, original_url: str, user_id: str = "") -> ShortenResponse:
        return self.shorten(ShortenRequest(original_url, user_id=user_id))

    def expand_url(self, short_code: str, ip_address: str = "") -> str | None:
        """The original address, or None if the link is unknown, inactive or expired."""
        url = self.database.get_url(short_code)
        if url is None or not url.is_active or url.is_expired():
            return None
        if ip_address:
            self.analytics.record_click(short_code, ip_address)
        url.increment_clicks()
        return url.original_url

    # Accounts

    def create_user(self, username: str, email: str, password: str) -> User | None:
        if not username or not email or not password:
            return None
        if self.database.email_exists(email) or self.database.username_exists(username):
            return None
        user = User(username, email, _hash_password(password))
        if not self.database.add_user(user):
            return None
        return user

    def authenticate_user(self, email: str, password: str) -> User | None:
        user = self.database.get_user_by_email(email)
        if user is None or user.password_hash != _hash_password(password):
            return None
        user.last_login_at = datetime.now()
        return user

    def update_user(self, user_id: str, username: str = "", email: str = "") -> bool:
        user = self.database.get_user(user_id)
        if user is None:
            return False
        if username and username != user.username and self.database.username_exists(username):
            return False
        if email and email != user.email and self.database.email_exists(email):
            return False
        if username:
            user.username = username
        if email:
            user.email = email
        return True

    def delete_user(self, user_id: str) -> bool:
        return self.database.remove_user(user_id)

    # Links

    def update_url(
        self, short_code: str, title: str = "", description: str = "", expiration_days: int = 0
    ) -> bool:
        url = self.database.get_url(short_code)
        if url is None:
            return False
        if title:
            url.title = title
        if description:
            url.description = description
        if expiration_days > 0:
            url.expires_at = _expiry(expiration_days)
        return True

    def delete_url(self, short_code: str, user_id: str = "") -> bool:
        """Remove a link; a given ``user_id`` must match the creator, if any."""
        url = self.database.get_url(short_code)
        if url is None:
            return False
        if user_id and url.creator is not None and url.creator.user_id != user_id:
            return False
        self.analytics.clear_url_stats(short_code)
        self.hash_generator.remove_used_code(short_code)
        return self.database.remove_url(short_code)

    def user_urls(self, user_id: str) -> list[URL]:
        return self.database.urls_by_user(user_id)

    # Reports

    def url_analytics(self, short_code: str) -> UrlStats:
        return self.analytics.url_stats(short_code)

    def top_urls(self, limit: int = 10) -> list[tuple[str, int]]:
        return self.analytics.top_urls_by_clicks(limit)

    def clicks_by_country(self, short_code: str) -> list[tuple[str, int]]:
        return self.analytics.clicks_by_country(short_code)

    def clicks_by_device(self, short_code: str) -> list[tuple[str, int]]:
        return self.analytics.clicks_by_device(short_code)

    # Maintenance

    def cleanup_expired_urls(self) -> None:
        self.database.cleanup_expired_urls()

    def cleanup_old_analytics(self, days_to_keep: int = 90) -> None:
        self.analytics.cleanup_old_events(days_to_keep)

    def total_urls(self) -> int:
        return self.database.total_urls()

    def total_users(self) -> int:
        return self.database.total_users()

    def total_clicks(self) -> int:
        return sum(url.click_count for url in self.database.all_urls())

    # Validation

    def is_valid_url(self, url: str) -> bool:
        return bool(url) and _URL_PATTERN.fullmatch(url) is not None

    def is_valid_custom_code(self, code: str) -> bool:
        if not code or len(code) > MAX_CUSTOM_LENGTH:
            return False
        return all(c in CHARACTERS for c in code)

    def sanitize_url(self, url: str) -> str:
        """Add ``http://`` when no scheme is given and drop one trailing slash."""
        if not url.startswith(("http://", "https://")):
            url = "http://" + url
        if url.endswith("/"):
            url = url[:-1]
        return url
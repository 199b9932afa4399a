"""Thread-safe in-memory storage for short links and their owners."""

from __future__ import annotations

import threading
from typing import TypeVar

from sysdes.shortener.links import URL, User

_T = TypeVar("_T")


def _truncate(items: list[_T], limit: int) -> list[_T]:
    # A negative limit keeps everything.
    return items[:limit] if limit >= 0 else items


class Database:
    """Holds links by short code and users by id, e-mail and username."""

    def __init__(self) -> None:
        self._urls: dict[str, URL] = {}
        self._users: dict[str, User] = {}
        self._users_by_email: dict[str, User] = {}
        self._users_by_username: dict[str, User] = {}
        self._url_lock = threading.Lock()
        self._user_lock = threading.Lock()

    # Links

    def add_url(self, url: URL) -> bool:
        """Store ``url``; returns False if its short code is already taken."""
        with self._url_lock:
            if url.short_code in self._urls:
                return False
            self._urls[url.short_code] = url
            if url.creator is not None:
                url.creator.add_created_url(url)
            return True

    def remove_url(self, short_code: str) -> bool:
        with self._url_lock:
            url = self._urls.pop(short_code, None)
            if url is None:
                return False
            if url.creator is not None:
                url.creator.remove_created_url(short_code)
            return True

    def get_url(self, short_code: str) -> URL | None:
        with self._url_lock:
            return self._urls.get(short_code)

    def all_urls(self) -> list[URL]:
        with self._url_lock:
            return list(self._urls.values())

    def urls_by_user(self, user_id: str) -> list[URL]:
        with self._url_lock:
            return [
                url
                for url in self._urls.values()
                if url.creator is not None and url.creator.user_id == user_id
            ]

    def url_exists(self, short_code: str) -> bool:
        with self._url_lock:
            return short_code in self._urls

    def total_urls(self) -> int:
        with self._url_lock:
            return len(self._urls)

    # Users

    def add_user(self, user: User) -> bool:
        """Store ``user``; returns False if its id, e-mail or username is taken."""
        with self._user_lock:
            if (
                user.user_id in self._users
                or user.email in self._users_by_email
                or user.username in self._users_by_username
            ):
                return False
            self._users[user.user_id] = user
            self._users_by_email[user.email] = user
            self._users_by_username[user.username] = user
            return True

    def remove_user(self, user_id: str) -> bool:
        with self._user_lock:
            user = self._users.pop(user_id, None)
            if user is None:
                return False
            self._users_by_email.pop(user.email, None)
            self._users_by_username.pop(user.username, None)
            return True

    def get_user(self, user_id: str) -> User | None:
        with self._user_lock:
            return self._users.get(user_id)

    def get_user_by_email(self, email: str) -> User | None:
        with self._user_lock:
            return self._users_by_email.get(email)

    def get_user_by_username(self, username: str) -> User | None:
        with self._user_lock:
            return self._users_by_username.get(username)

    def all_users(self) -> list[User]:
        with self._user_lock:
            return list(self._users.values())

    def user_exists(self, user_id: str) -> bool:
        with self._user_lock:
            return user_id in self._users

    def email_exists(self, email: str) -> bool:
        with self._user_lock:
            return email in self._users_by_email

    def username_exists(self, username: str) -> bool:
        with self._user_lock:
            return username in self._users_by_username

    def total_users(self) -> int:
        with self._user_lock:
            return len(self._users)

    # Reports

    def most_clicked_urls(self, limit: int = 10) -> list[URL]:
        with self._url_lock:
            ranked = sorted(self._urls.values(), key=lambda u: u.click_count, reverse=True)
        return _truncate(ranked, limit)

    def recently_created_urls(self, limit: int = 10) -> list[URL]:
        with self._url_lock:
            ranked = sorted(self._urls.values(), key=lambda u: u.created_at, reverse=True)
        return _truncate(ranked, limit)

    def expired_urls(self) -> list[URL]:
        with self._url_lock:
            return [url for url in self._urls.values() if url.is_expired()]

    # Maintenance

    def cleanup_expired_urls(self) -> None:
        with self._url_lock:
            self._urls = {code: url for code, url in self._urls.items() if not url.is_expired()}

    def clear_all(self) -> None:
        with self._url_lock, self._user_lock:
            self._urls.clear()
            self._users.clear()
            self._users_by_email.clear()
            self._users_by_username.clear()
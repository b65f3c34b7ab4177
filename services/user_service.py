"""User accounts, authentication and profile management."""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any, Dict, List, Optional, Tuple

from logic.errors import Conflict, InvalidCredentials, NotFound
from logic.security import TokenService, hash_password, verify_password
from models.common import utc_now
from models.user import User, normalise_email
from tools.document_store import DocumentStore, DuplicateKeyError, new_object_id
from tools.observability import instrument_service

LOGGER = logging.getLogger(__name__)
COLLECTION = "users"
PROFILE_FIELDS = ("bio", "profile_photo", "website")


class UserService:
    """Registration, login and CRUD over user documents."""

    def __init__(self, store: DocumentStore, tokens: TokenService) -> None:
        self.store = store
        self.tokens = tokens

    @instrument_service("users.register", "Failed to register user")
    def register(self, username: str, email: str, password: str) -> Tuple[User, str]:
        """Create an account and return it with a freshly issued token."""

        user = User(
            id=new_object_id(),
            username=username,
            email=email,
            password_hash=hash_password(password),
        )
        try:
            self.store.insert(COLLECTION, asdict(user), unique_keys={"email": user.email})
        except DuplicateKeyError as exc:
            raise Conflict("Email already registered") from exc
        LOGGER.info("User registered", extra={"user_id": user.id})
        return user, self.tokens.issue_token(user.id)

    @instrument_service("users.login", "Failed to log in")
    def login(self, email: str, password: str) -> Tuple[User, str]:
        document = self.store.find_by_key(COLLECTION, "email", normalise_email(email))
        if document is None or not verify_password(password, document["password_hash"]):
            raise InvalidCredentials("Invalid email or password")
        user = User.from_document(document)
        return user, self.tokens.issue_token(user.id)

    @instrument_service("users.list", "Failed to retrieve users")
    def list_users(self) -> List[Dict[str, Any]]:
        return [User.from_document(doc).summary() for doc in self.store.find(COLLECTION)]

    @instrument_service("users.get", "Failed to retrieve user")
    def get(self, user_id: str) -> User:
        return self._require(user_id)

    @instrument_service("users.update", "Failed to update user")
    def update(
        self,
        user_id: str,
        username: Optional[str] = None,
        email: Optional[str] = None,
        password: Optional[str] = None,
    ) -> User:
        changes: Dict[str, Any] = {}
        unique_keys: Dict[str, str] = {}
        if username is not None:
            changes["username"] = username.strip()
        if email is not None:
            changes["email"] = unique_keys["email"] = normalise_email(email)
        if password is not None:
            changes["password_hash"] = hash_password(password)
        changes["updated_at"] = utc_now()
        try:
            document = self.store.update(COLLECTION, user_id, changes, unique_keys=unique_keys)
        except DuplicateKeyError as exc:
            raise Conflict("Email already registered") from exc
        if document is None:
            raise NotFound("User not found")
        return User.from_document(document)

    @instrument_service("users.delete", "Failed to delete user")
    def delete(self, user_id: str) -> User:
        """Delete an account and detach it from every follow relationship."""

        with self.store.transaction():
            user = self._require(user_id)
            for follower_id in user.followers:
                self.store.modify(COLLECTION, follower_id, _forget(user_id, "following"))
            for followed_id in user.following:
                self.store.modify(COLLECTION, followed_id, _forget(user_id, "followers"))
            self.store.delete(COLLECTION, user_id)
        return user

    @instrument_service("users.add_profile", "Failed to add profile information")
    def add_profile(self, user_id: str, **fields: Optional[str]) -> User:
        """Fill profile fields that are still empty, leaving existing values alone."""

        def mutate(document: Dict[str, Any]) -> None:
            for key in PROFILE_FIELDS:
                if fields.get(key) and not document.get(key):
                    document[key] = fields[key]
            document["updated_at"] = utc_now()

        return self._modify(user_id, mutate)

    @instrument_service("users.update_profile", "Failed to update profile information")
    def update_profile(self, user_id: str, **fields: Optional[str]) -> User:
        changes = {key: fields[key] for key in PROFILE_FIELDS if fields.get(key) is not None}
        changes["updated_at"] = utc_now()
        document = self.store.update(COLLECTION, user_id, changes)
        if document is None:
            raise NotFound("User not found")
        return User.from_document(document)

    @instrument_service("users.remove_profile", "Failed to remove profile information")
    def remove_profile(self, user_id: str) -> User:
        cleared = {"bio": "", "profile_photo": None, "website": "", "updated_at": utc_now()}
        document = self.store.update(COLLECTION, user_id, cleared)
        if document is None:
            raise NotFound("User not found")
        return User.from_document(document)

    @instrument_service("users.update_bio", "Failed to update the bio")
    def update_bio(self, user_id: str, bio: str) -> User:
        document = self.store.update(COLLECTION, user_id, {"bio": bio, "updated_at": utc_now()})
        if document is None:
            raise NotFound("User not found")
        return User.from_document(document)

    @instrument_service("users.remove_profile_photo", "Failed to remove the profile photo")
    def remove_profile_photo(self, user_id: str) -> User:
        changes = {"profile_photo": None, "updated_at": utc_now()}
        document = self.store.update(COLLECTION, user_id, changes)
        if document is None:
            raise NotFound("User not found")
        return User.from_document(document)

    def _require(self, user_id: str) -> User:
        document = self.store.get(COLLECTION, user_id)
        if document is None:
            raise NotFound("User not found")
        return User.from_document(document)

    def _modify(self, user_id: str, mutator) -> User:
        document = self.store.modify(COLLECTION, user_id, mutator)
        if document is None:
            raise NotFound("User not found")
        return User.from_document(document)


def _forget(user_id: str, list_field: str):
    """Mutator removing ``user_id`` from a follow list and re-syncing its counter."""

    counter = "following_count" if list_field == "following" else "follower_count"

    def mutate(document: Dict[str, Any]) -> None:
        document[list_field] = [item for item in document.get(list_field, []) if item != user_id]
        document[counter] = len(document[list_field])

    return mutate


__all__ = ["UserService"]

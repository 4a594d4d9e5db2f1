"""
User Service - CRUD and search over the users collection.

Translates raw request fields into collection calls and raises
ServiceError for every failure the HTTP layer must report.
"""
import math
import re
from typing import Optional, Union

from bson import ObjectId
from pydantic import ValidationError
from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError

from shared.models.users_model import (
    UserFields,
    UsersModel,
    Pagination,
    UserListResponse,
    normalize_email,
    utc_now,
    validation_messages,
)
from shared.services.logger import get_logger
from modules.users.services.errors import ServiceError


logger = get_logger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10

LEADING_INT = re.compile(r"\s*([+-]?\d+)")

# Newest first; _id breaks ties between documents created in the same millisecond
NEWEST_FIRST = [("created_at", DESCENDING), ("_id", DESCENDING)]


def parse_positive_int(value: Union[str, int, None], default: int) -> int:
    """
    Coerce a query parameter to a positive int, falling back to default.

    Reads the leading integer and ignores the rest ("2.5" -> 2, "20abc" -> 20).
    """
    if value is None or isinstance(value, bool):
        return default
    match = LEADING_INT.match(str(value))
    if not match:
        return default
    number = int(match.group(1))
    return number if number >= 1 else default


class UserService:
    """
    Service for managing users.

    - The collection is injected (from the app's MongoDBPool, or a test double)
    - Emails are stored trimmed and lowercased, unique across the collection
    - Malformed ids read as "not found" unless strict_ids is set
    """

    def __init__(self, collection: Collection, strict_ids: bool = False):
        """
        Initialize user service.

        Args:
            collection: MongoDB users collection
            strict_ids: Raise INVALID_IDENTIFIER for malformed ids instead of NOT_FOUND
        """
        self.collection = collection
        self.strict_ids = strict_ids

    def ensure_indexes(self) -> None:
        """Create the unique email index and the ordering index."""
        self.collection.create_index([("email", ASCENDING)], unique=True)
        self.collection.create_index([("created_at", DESCENDING)])

    def _object_id(self, user_id: str) -> ObjectId:
        if not ObjectId.is_valid(user_id):
            logger.debug(f"Malformed user id: {user_id!r}")
            if self.strict_ids:
                raise ServiceError.invalid_identifier()
            raise ServiceError.not_found()
        return ObjectId(user_id)

    def _email_taken(self, email: str) -> bool:
        return self.collection.find_one({"email": email}) is not None

    def list_users(
        self,
        page: Union[str, int, None] = None,
        limit: Union[str, int, None] = None,
    ) -> UserListResponse:
        """
        List users, newest first.

        Args:
            page: 1-based page number (default 1)
            limit: Page size (default 10)

        Returns:
            UserListResponse with the page and pagination info
        """
        page = parse_positive_int(page, DEFAULT_PAGE)
        limit = parse_positive_int(limit, DEFAULT_LIMIT)
        skip = (page - 1) * limit

        docs = self.collection.find({}).sort(NEWEST_FIRST).skip(skip).limit(limit)
        users = [UsersModel.from_document(doc) for doc in docs]
        total = self.collection.count_documents({})

        return UserListResponse(
            users=users,
            pagination=Pagination(
                page=page,
                limit=limit,
                total=total,
                pages=math.ceil(total / limit),
            ),
        )

    def get_user(self, user_id: str) -> UsersModel:
        """
        Get user by id.

        Raises:
            ServiceError: NOT_FOUND, or INVALID_IDENTIFIER in strict mode
        """
        doc = self.collection.find_one({"_id": self._object_id(user_id)})
        if not doc:
            raise ServiceError.not_found()
        return UsersModel.from_document(doc)

    def create_user(self, name: Optional[str], email: Optional[str]) -> UsersModel:
        """
        Create a new user.

        Raises:
            ServiceError: MISSING_FIELD, VALIDATION_FAILURE or DUPLICATE_EMAIL
        """
        if not name or not email:
            raise ServiceError.missing_field()

        try:
            fields = UserFields(name=name, email=email)
        except ValidationError as e:
            raise ServiceError.validation_failure(validation_messages(e))

        logger.info(f"Creating user: {fields.email}")

        if self._email_taken(fields.email):
            logger.warning(f"Email already exists: {fields.email}")
            raise ServiceError.duplicate_email()

        now = utc_now()
        doc = {
            "name": fields.name,
            "email": fields.email,
            "created_at": now,
            "updated_at": now,
        }

        try:
            result = self.collection.insert_one(doc)
        except DuplicateKeyError:
            logger.warning(f"Email already exists (index): {fields.email}")
            raise ServiceError.duplicate_email()

        user = UsersModel(
            id=str(result.inserted_id),
            name=fields.name,
            email=fields.email,
            created_at=now,
            updated_at=now,
        )
        logger.info(f"User created: {user.id}")
        return user

    def update_user(
        self,
        user_id: str,
        name: Optional[str] = None,
        email: Optional[str] = None,
    ) -> UsersModel:
        """
        Update name and/or email. Falsy values keep the stored value.

        Raises:
            ServiceError: NOT_FOUND, DUPLICATE_EMAIL or VALIDATION_FAILURE
        """
        oid = self._object_id(user_id)
        current = self.collection.find_one({"_id": oid})
        if not current:
            raise ServiceError.not_found()

        if email and normalize_email(email) != current["email"]:
            if self._email_taken(normalize_email(email)):
                logger.warning(f"Email already exists: {email}")
                raise ServiceError.duplicate_email()

        try:
            fields = UserFields(
                name=name or current["name"],
                email=email or current["email"],
            )
        except ValidationError as e:
            raise ServiceError.validation_failure(validation_messages(e))

        try:
            doc = self.collection.find_one_and_update(
                {"_id": oid},
                {"$set": {
                    "name": fields.name,
                    "email": fields.email,
                    "updated_at": utc_now(),
                }},
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError:
            logger.warning(f"Email already exists (index): {fields.email}")
            raise ServiceError.duplicate_email()

        if not doc:
            raise ServiceError.not_found()

        logger.info(f"User updated: {user_id}")
        return UsersModel.from_document(doc)

    def delete_user(self, user_id: str) -> None:
        """
        Delete a user permanently.

        Raises:
            ServiceError: NOT_FOUND
        """
        doc = self.collection.find_one_and_delete({"_id": self._object_id(user_id)})
        if not doc:
            raise ServiceError.not_found()
        logger.info(f"User deleted: {user_id}")

    def search_users(self, query: str) -> list[UsersModel]:
        """Users whose name or email contains query, case-insensitively."""
        pattern = {"$regex": re.escape(query), "$options": "i"}
        docs = self.collection.find(
            {"$or": [{"name": pattern}, {"email": pattern}]}
        ).sort(NEWEST_FIRST)

        return [UsersModel.from_document(doc) for doc in docs]

"""Vesture application container."""

from __future__ import annotations

import logging

from logic.security import TokenService
from services.closet_item_service import ClosetItemService
from services.notification_service import NotificationService
from services.ootd_post_service import OOTDPostService
from services.product_service import ProductService
from services.social_service import SocialService
from services.user_service import UserService
from services.wishlist_item_service import WishlistItemService
from tools.document_store import DocumentStore, SQLiteDocumentStore
from tools.recognition_provider import ClarifaiRecognitionProvider, RecognitionProvider
from vesture_app.config import AppConfig
from vesture_app.logging_config import configure_logging, get_logger, log_event

LOGGER = get_logger(__name__)


class VestureApp:
    """Wires together the store, services and providers once at start-up.

    The HTTP layer receives this object by reference; nothing here is global.
    """

    def __init__(
        self,
        config: AppConfig | None = None,
        store: DocumentStore | None = None,
        recognition: RecognitionProvider | None = None,
    ) -> None:
        self.config = config or AppConfig.from_env()
        configure_logging(self.config.log_level, environment=self.config.environment)

        self.store = store or SQLiteDocumentStore(self.config.database_path)
        self.recognition = recognition or ClarifaiRecognitionProvider(
            api_key=self.config.recognition_api_key,
            model_url=self.config.recognition_model_url,
            timeout_seconds=self.config.recognition_timeout_seconds,
        )
        self.tokens = TokenService(self.config.jwt_secret, self.config.token_ttl_seconds)

        self.notifications = NotificationService(self.store)
        self.users = UserService(self.store, self.tokens)
        self.social = SocialService(self.store, self.notifications)
        self.products = ProductService(self.store, self.recognition)
        self.closet_items = ClosetItemService(self.store)
        self.ootd_posts = OOTDPostService(self.store, self.products, self.notifications)
        self.wishlist_items = WishlistItemService(self.store)

        log_event(
            LOGGER,
            logging.INFO,
            "app_initialised",
            environment=self.config.environment or "local",
            database_path=str(self.config.database_path),
            recognition_provider=type(self.recognition).__name__,
        )

    def is_ready(self) -> bool:
        """Readiness check used by the health probe."""

        return self.store.ping()


__all__ = ["VestureApp"]

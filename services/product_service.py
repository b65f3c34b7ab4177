"""Product catalog service, including upsert from image recognition."""

from __future__ import annotations

import logging
from dataclasses import asdict, fields
from typing import Any, Dict, List, Mapping, Optional, Tuple

from logic.errors import Conflict, NotFound, ValidationFailed
from models.product import Product
from models.taxonomy import match_color, match_garment_type, normalise_tags
from tools.document_store import DocumentStore, DuplicateKeyError, new_object_id
from tools.observability import instrument_service
from tools.recognition_provider import RecognitionProvider

LOGGER = logging.getLogger(__name__)
COLLECTION = "products"
IDENTITY_KEY = "identity"
MIN_TAG_CONFIDENCE = 0.5
MAX_RECOGNISED_TAGS = 10
SORTABLE_FIELDS = {f.name for f in fields(Product)}
# fields an upsert may not overwrite on an existing product
_PRESERVED_ON_UPSERT = {"id", "source", "created_at"}


def _split_csv(value: Optional[str]) -> List[str]:
    return [part.strip() for part in (value or "").split(",") if part.strip()]


def _sort_key(sort_fields: List[str]):
    def key(document: Dict[str, Any]) -> Tuple:
        parts = []
        for name in sort_fields:
            value = document.get(name)
            if isinstance(value, str):
                value = value.lower()
            parts.append((value is None, value if value is not None else 0))
        return tuple(parts)

    return key


class ProductService:
    """CRUD over the catalog keyed by the ``(name, brand)`` identity."""

    def __init__(self, store: DocumentStore, recognition: RecognitionProvider) -> None:
        self.store = store
        self.recognition = recognition

    def _build(self, candidate: Mapping[str, Any], source: str) -> Product:
        data = {key: value for key, value in candidate.items() if value is not None}
        data.setdefault("image", "")
        data.pop("id", None)
        data.pop("source", None)
        try:
            return Product(id=new_object_id(), source=source, **data)
        except (TypeError, ValueError) as exc:
            raise ValidationFailed(f"Invalid product: {exc}") from exc

    @instrument_service("products.create", "Failed to create product")
    def create(self, candidate: Mapping[str, Any], source: str = "UserUploaded") -> Product:
        product = self._build(candidate, source)
        try:
            self.store.insert(
                COLLECTION, asdict(product), unique_keys={IDENTITY_KEY: product.identity_key}
            )
        except DuplicateKeyError as exc:
            raise Conflict("A product with this name and brand already exists") from exc
        return product

    @instrument_service("products.list", "Failed to retrieve products")
    def list_products(
        self,
        brand: Optional[str] = None,
        type: Optional[str] = None,
        season: Optional[str] = None,
        color: Optional[str] = None,
        tags: Optional[str] = None,
        sort_by: Optional[str] = None,
    ) -> List[Product]:
        """Filter the catalog; ``tags`` and ``sort_by`` are comma-separated."""

        wanted_tags = normalise_tags(_split_csv(tags))
        sort_fields = _split_csv(sort_by)
        unknown = [name for name in sort_fields if name not in SORTABLE_FIELDS]
        if unknown:
            raise ValidationFailed(f"Cannot sort by: {', '.join(unknown)}")

        def predicate(document: Dict[str, Any]) -> bool:
            if brand and str(document.get("brand", "")).lower() != brand.strip().lower():
                return False
            if type and document.get("type") != type.strip().lower():
                return False
            if color and document.get("color") != color.strip().lower():
                return False
            if season and str(document.get("season") or "").lower() != season.strip().lower():
                return False
            if wanted_tags and not set(wanted_tags) & set(document.get("tags", [])):
                return False
            return True

        documents = self.store.find(COLLECTION, predicate=predicate)
        if sort_fields:
            documents.sort(key=_sort_key(sort_fields))
        return [Product.from_document(doc) for doc in documents]

    @instrument_service("products.get", "Failed to retrieve product")
    def get(self, product_id: str) -> Product:
        document = self.store.get(COLLECTION, product_id)
        if document is None:
            raise NotFound("Product not found")
        return Product.from_document(document)

    @instrument_service("products.update", "Failed to update product")
    def update(self, product_id: str, changes: Mapping[str, Any]) -> Product:
        with self.store.transaction():
            current = self.get(product_id)
            provided = {key: value for key, value in changes.items() if value is not None}
            try:
                merged = Product.from_document({**asdict(current), **provided, "id": product_id})
            except (TypeError, ValueError) as exc:
                raise ValidationFailed(f"Invalid product: {exc}") from exc
            unique_keys = {}
            if merged.identity_key != current.identity_key:
                unique_keys[IDENTITY_KEY] = merged.identity_key
            try:
                document = self.store.update(
                    COLLECTION, product_id, asdict(merged), unique_keys=unique_keys
                )
            except DuplicateKeyError as exc:
                raise Conflict("A product with this name and brand already exists") from exc
        return Product.from_document(document)

    @instrument_service("products.delete", "Failed to delete product")
    def delete(self, product_id: str) -> Product:
        document = self.store.delete(COLLECTION, product_id)
        if document is None:
            raise NotFound("Product not found")
        return Product.from_document(document)

    @instrument_service("products.upsert", "Failed to upsert product")
    def upsert(
        self, candidate: Mapping[str, Any], source: str = "Clarifai", refresh: bool = True
    ) -> Tuple[Product, bool]:
        """Insert the candidate or refresh the product sharing its identity.

        Only keys present in ``candidate`` overwrite stored values. With
        ``refresh=False`` an existing product is returned untouched.
        Returns the stored product and whether it was newly created.
        """

        product = self._build(candidate, source)
        with self.store.transaction():
            document, created = self.store.insert_if_absent(
                COLLECTION, IDENTITY_KEY, product.identity_key, asdict(product)
            )
            if not created and refresh:
                refreshed = {
                    key: value
                    for key, value in asdict(product).items()
                    if key not in _PRESERVED_ON_UPSERT and candidate.get(key) is not None
                }
                document = self.store.update(COLLECTION, document["id"], refreshed)
        LOGGER.info(
            "Product upserted",
            extra={"product_id": document["id"], "was_created": created, "source": source},
        )
        return Product.from_document(document), created

    @instrument_service("products.recognize_and_upsert", "Failed to recognise product")
    def recognize_and_upsert(
        self, image_url: str, brand: str, name: str, price: float, link: str
    ) -> Tuple[Product, bool]:
        """Run image recognition and upsert the resulting catalog entry."""

        concepts = self.recognition.detect_concepts(image_url)
        garment_type: Optional[str] = None
        color: Optional[str] = None
        tags: List[str] = []
        for concept in concepts:
            if garment_type is None and match_garment_type(concept.name):
                garment_type = match_garment_type(concept.name)
                continue
            if color is None and match_color(concept.name):
                color = match_color(concept.name)
                continue
            if concept.confidence >= MIN_TAG_CONFIDENCE:
                tags.append(concept.name)

        if garment_type is None:
            raise ValidationFailed("No garment type recognised in the image")
        if color is None:
            raise ValidationFailed("No colour recognised in the image")

        candidate = {
            "brand": brand,
            "name": name,
            "type": garment_type,
            "color": color,
            "price": price,
            "link": link,
            "image": image_url,
            "tags": normalise_tags(tags)[:MAX_RECOGNISED_TAGS],
        }
        return self.upsert(candidate, source="Clarifai")


__all__ = ["ProductService"]

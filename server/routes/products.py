"""Product catalog routes."""

from __future__ import annotations

from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, Response

from logic.validation import (
    ProductCreateRequest,
    ProductUpdateRequest,
    ProductUpsertRequest,
    RecognizeProductRequest,
)
from models.product import Product
from server.dependencies import Container, CurrentUser, IdPath

router = APIRouter(prefix="/products", tags=["products"])


def _upsert_response(response: Response, product: Product, created: bool) -> dict:
    response.status_code = 201 if created else 200
    return {
        "message": "Product created successfully" if created else "Product updated successfully",
        "product": asdict(product),
        "created": created,
    }


@router.post("", status_code=201)
def create_product(
    request: ProductCreateRequest, container: Container, actor_id: CurrentUser
) -> dict:
    product = container.products.create(request.model_dump())
    return {"message": "Product created successfully", "product": asdict(product)}


@router.get("")
def list_products(
    container: Container,
    brand: Optional[str] = None,
    type: Optional[str] = None,
    season: Optional[str] = None,
    color: Optional[str] = None,
    tags: Optional[str] = None,
    sort_by: Optional[str] = None,
) -> list:
    products = container.products.list_products(
        brand=brand, type=type, season=season, color=color, tags=tags, sort_by=sort_by
    )
    return [asdict(product) for product in products]


@router.post("/upsert")
def upsert_product(
    request: ProductUpsertRequest,
    response: Response,
    container: Container,
    actor_id: CurrentUser,
) -> dict:
    product, created = container.products.upsert(request.changes(), source="Clarifai")
    return _upsert_response(response, product, created)


@router.post("/recognize")
def recognize_product(
    request: RecognizeProductRequest,
    response: Response,
    container: Container,
    actor_id: CurrentUser,
) -> dict:
    product, created = container.products.recognize_and_upsert(
        image_url=request.image_url,
        brand=request.brand,
        name=request.name,
        price=request.price,
        link=request.link,
    )
    return _upsert_response(response, product, created)


@router.get("/{product_id}")
def get_product(product_id: IdPath, container: Container) -> dict:
    return asdict(container.products.get(product_id))


@router.put("/{product_id}")
def update_product(
    product_id: IdPath,
    request: ProductUpdateRequest,
    container: Container,
    actor_id: CurrentUser,
) -> dict:
    product = container.products.update(product_id, request.changes())
    return {"message": "Product updated successfully", "product": asdict(product)}


@router.delete("/{product_id}")
def delete_product(product_id: IdPath, container: Container, actor_id: CurrentUser) -> dict:
    container.products.delete(product_id)
    return {"message": "Product deleted successfully"}

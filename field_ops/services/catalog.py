"""
Team members and the product/service catalog.

Line items copy name and price out of a product; nothing links back to the
catalog afterwards.
"""

import logging
from typing import List, Optional

from ..core.clock import utc_now
from ..exceptions import InvalidInputError
from ..models import Product, TeamMember
from ..schemas import ProductIn, ProductUpdate, TeamMemberIn, TeamMemberUpdate
from .document_store import DocumentStore

logger = logging.getLogger(__name__)


def _drop_null_required(changes: dict, *fields: str) -> dict:
    for field in fields:
        if changes.get(field) is None:
            changes.pop(field, None)
    return changes


# Team

def list_team(store: DocumentStore, active_only: bool = False) -> List[TeamMember]:
    members = [TeamMember.model_validate(r) for r in store.team.all()]
    if active_only:
        members = [m for m in members if m.active]
    members.sort(key=lambda m: m.name.lower())
    return members


def get_team_member(store: DocumentStore, member_id: int) -> TeamMember:
    return TeamMember.model_validate(store.team.require(member_id))


def ensure_team_member(store: DocumentStore, member_id: int) -> TeamMember:
    record = store.team.get(member_id)
    if record is None:
        raise InvalidInputError(f"team member {member_id} does not exist",
                                details={"assigned_to_id": member_id})
    return TeamMember.model_validate(record)


def create_team_member(store: DocumentStore, payload: TeamMemberIn) -> TeamMember:
    with store.transaction():
        member = TeamMember(id=store.next_id("team"), created_at=utc_now(), **payload.model_dump())
        store.team.insert(member.model_dump(mode="json"))
    logger.info(f"Team member added: {member.name}", extra={"evt": "team_member_created", "member_id": member.id})
    return member


def update_team_member(store: DocumentStore, member_id: int, payload: TeamMemberUpdate) -> TeamMember:
    with store.transaction():
        member = get_team_member(store, member_id)
        changes = _drop_null_required(payload.model_dump(exclude_unset=True), "name", "role", "color", "active")
        member = member.model_copy(update=changes)
        store.team.replace(member.model_dump(mode="json"))
    return member


def delete_team_member(store: DocumentStore, member_id: int) -> None:
    store.team.delete(member_id)


# Products

def list_products(store: DocumentStore, category: Optional[str] = None) -> List[Product]:
    products = [Product.model_validate(r) for r in store.products.all()]
    if category:
        products = [p for p in products if (p.category or "").lower() == category.lower()]
    products.sort(key=lambda p: ((p.category or "").lower(), p.name.lower()))
    return products


def get_product(store: DocumentStore, product_id: int) -> Product:
    return Product.model_validate(store.products.require(product_id))


def create_product(store: DocumentStore, payload: ProductIn) -> Product:
    with store.transaction():
        product = Product(id=store.next_id("products"), created_at=utc_now(), **payload.model_dump())
        store.products.insert(product.model_dump(mode="json"))
    logger.info(f"Product added: {product.name}", extra={"evt": "product_created", "product_id": product.id})
    return product


def update_product(store: DocumentStore, product_id: int, payload: ProductUpdate) -> Product:
    with store.transaction():
        product = get_product(store, product_id)
        changes = _drop_null_required(payload.model_dump(exclude_unset=True), "name", "price", "unit", "is_taxable")
        product = product.model_copy(update=changes)
        store.products.replace(product.model_dump(mode="json"))
    return product


def delete_product(store: DocumentStore, product_id: int) -> None:
    store.products.delete(product_id)

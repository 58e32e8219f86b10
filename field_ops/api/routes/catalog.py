from typing import Dict, List, Optional

from fastapi import APIRouter, Depends

from ...models import Product, TeamMember
from ...schemas import ProductIn, ProductUpdate, TeamMemberIn, TeamMemberUpdate
from ...services import catalog as catalog_service
from ...services.document_store import DocumentStore
from ..dependencies import get_store

router = APIRouter(tags=["catalog"])


# Team

@router.get("/team", response_model=List[TeamMember])
def list_team(active: bool = False, store: DocumentStore = Depends(get_store)):
    return catalog_service.list_team(store, active_only=active)


@router.post("/team", response_model=TeamMember)
def create_team_member(body: TeamMemberIn, store: DocumentStore = Depends(get_store)):
    return catalog_service.create_team_member(store, body)


@router.put("/team/{member_id}", response_model=TeamMember)
def update_team_member(member_id: int, body: TeamMemberUpdate, store: DocumentStore = Depends(get_store)):
    return catalog_service.update_team_member(store, member_id, body)


@router.delete("/team/{member_id}")
def delete_team_member(member_id: int, store: DocumentStore = Depends(get_store)) -> Dict[str, bool]:
    catalog_service.delete_team_member(store, member_id)
    return {"success": True}


# Products

@router.get("/products", response_model=List[Product])
def list_products(category: Optional[str] = None, store: DocumentStore = Depends(get_store)):
    return catalog_service.list_products(store, category)


@router.post("/products", response_model=Product)
def create_product(body: ProductIn, store: DocumentStore = Depends(get_store)):
    return catalog_service.create_product(store, body)


@router.put("/products/{product_id}", response_model=Product)
def update_product(product_id: int, body: ProductUpdate, store: DocumentStore = Depends(get_store)):
    return catalog_service.update_product(store, product_id, body)


@router.delete("/products/{product_id}")
def delete_product(product_id: int, store: DocumentStore = Depends(get_store)) -> Dict[str, bool]:
    catalog_service.delete_product(store, product_id)
    return {"success": True}

"""
Signify - Data Store API Router
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.db_models import DataItemDB
from ..services.data_store_service import DataStoreService


router = APIRouter(prefix="/api/data", tags=["data"])


class DataItemRequest(BaseModel):
    name: str = Field(..., min_length=1)
    category: str = ""
    description: str = ""
    metadata: Dict[str, Any] = Field(default_factory=dict)


class DataItemResponse(BaseModel):
    id: int
    name: str
    category: str
    description: str
    created_at: Optional[datetime]
    updated_at: Optional[datetime]
    metadata: Dict[str, Any]


def item_response(item: DataItemDB) -> DataItemResponse:
    return DataItemResponse(
        id=item.id,
        name=item.name,
        category=item.category or "",
        description=item.description or "",
        created_at=item.created_at,
        updated_at=item.updated_at,
        metadata=dict(item.item_metadata or {}),
    )


@router.get("", response_model=List[DataItemResponse])
async def list_items(db: Session = Depends(get_db)):
    return [item_response(i) for i in DataStoreService(db).list_items()]


@router.get("/{item_id}", response_model=DataItemResponse)
async def get_item(item_id: int, db: Session = Depends(get_db)):
    item = DataStoreService(db).get_item(item_id)
    if item is None:
        raise HTTPException(status_code=404, detail="Data item not found")
    return item_response(item)


@router.post("", response_model=DataItemResponse, status_code=201)
async def create_item(request: DataItemRequest, db: Session = Depends(get_db)):
    return item_response(DataStoreService(db).add_item(request.model_dump()))


@router.put("/{item_id}", response_model=DataItemResponse)
async def update_item(item_id: int, request: DataItemRequest, db: Session = Depends(get_db)):
    item = DataStoreService(db).update_item(item_id, request.model_dump())
    if item is None:
        raise HTTPException(status_code=404, detail="Data item not found")
    return item_response(item)


@router.delete("/{item_id}", status_code=204)
async def delete_item(item_id: int, db: Session = Depends(get_db)):
    if not DataStoreService(db).delete_item(item_id):
        raise HTTPException(status_code=404, detail="Data item not found")
    return Response(status_code=204)

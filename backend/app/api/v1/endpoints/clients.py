"""
Client records. Admins manage them; client-role users read their own.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from app.core.database import get_db
from app.models.user import User
from app.models.client import Client
from app.schemas.client import ClientCreate, ClientUpdate, ClientResponse
from app.modules.auth.dependencies import get_current_admin, require_permission
from app.services.crud_service import client_crud

router = APIRouter(prefix="/clients", tags=["Clients"])


@router.get("", response_model=List[ClientResponse])
async def list_clients(
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    return await client_crud.list(db, order_by=Client.created_at.desc())


@router.post("", response_model=ClientResponse, status_code=status.HTTP_201_CREATED)
async def create_client(
    client_data: ClientCreate,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    return await client_crud.create(db, client_data.model_dump())


@router.get("/me", response_model=ClientResponse)
async def get_my_client(
    current_user: User = Depends(require_permission("clients", "read_own")),
    db: AsyncSession = Depends(get_db)
):
    """Client record linked to the calling client-role user"""
    if not current_user.client_id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No client record linked to this account"
        )
    return await client_crud.get_or_404(db, current_user.client_id)


@router.get("/{client_id}", response_model=ClientResponse)
async def get_client(
    client_id: str,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    return await client_crud.get_or_404(db, client_id)


@router.put("/{client_id}", response_model=ClientResponse)
async def update_client(
    client_id: str,
    client_data: ClientUpdate,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    client = await client_crud.get_or_404(db, client_id)
    return await client_crud.update(db, client, client_data.model_dump(exclude_unset=True))


@router.delete("/{client_id}")
async def delete_client(
    client_id: str,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    client = await client_crud.get_or_404(db, client_id)
    await client_crud.delete(db, client)
    return {"message": "Client deleted successfully"}

"""
Generic CRUD Service - shared data access for the back-office resources

One instance per model. Route handlers call these instead of building
queries inline; resource-specific rules stay in the handlers.
"""

from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import Base
from app.core.exceptions import ResourceNotFoundError, UserNotFoundError, InternshipNotFoundError
from app.models import (
    User, Client, Project, Task, Internship, InternshipApplication,
    InternshipListing, Bill, Contact, Message, Resource, InternshipRole,
)

ModelT = TypeVar("ModelT", bound=Base)


class CRUDService(Generic[ModelT]):
    """Create, read, update and delete rows of one model"""

    def __init__(
        self,
        model: Type[ModelT],
        resource_name: str,
        not_found_error: Optional[Type[ResourceNotFoundError]] = None,
    ):
        self.model = model
        self.resource_name = resource_name
        self.not_found_error = not_found_error

    async def get(self, db: AsyncSession, obj_id: str) -> Optional[ModelT]:
        return await db.get(self.model, obj_id)

    async def get_or_404(self, db: AsyncSession, obj_id: str) -> ModelT:
        obj = await self.get(db, obj_id)
        if obj is None:
            if self.not_found_error is not None:
                raise self.not_found_error(obj_id)
            raise ResourceNotFoundError(self.resource_name, obj_id)
        return obj

    async def list(
        self,
        db: AsyncSession,
        *filters: Any,
        order_by: Any = None,
        limit: Optional[int] = None,
    ) -> List[ModelT]:
        query = select(self.model)
        if filters:
            query = query.where(*filters)
        if order_by is not None:
            query = query.order_by(order_by)
        if limit is not None:
            query = query.limit(limit)
        result = await db.execute(query)
        return list(result.scalars().all())

    async def create(self, db: AsyncSession, values: Dict[str, Any]) -> ModelT:
        obj = self.model(**values)
        db.add(obj)
        await db.commit()
        await db.refresh(obj)
        return obj

    async def update(self, db: AsyncSession, obj: ModelT, values: Dict[str, Any]) -> ModelT:
        for field, value in values.items():
            setattr(obj, field, value)
        await db.commit()
        await db.refresh(obj)
        return obj

    async def delete(self, db: AsyncSession, obj: ModelT) -> None:
        await db.delete(obj)
        await db.commit()


user_crud = CRUDService(User, "User", UserNotFoundError)
client_crud = CRUDService(Client, "Client")
project_crud = CRUDService(Project, "Project")
task_crud = CRUDService(Task, "Task")
internship_crud = CRUDService(Internship, "Internship", InternshipNotFoundError)
application_crud = CRUDService(InternshipApplication, "Application")
listing_crud = CRUDService(InternshipListing, "Listing")
bill_crud = CRUDService(Bill, "Bill")
contact_crud = CRUDService(Contact, "Contact")
message_crud = CRUDService(Message, "Message")
resource_crud = CRUDService(Resource, "Resource")
role_crud = CRUDService(InternshipRole, "Role")

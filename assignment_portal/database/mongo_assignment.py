# assignment_portal/database/mongo_assignment.py
from datetime import datetime
from typing import Any, List, Mapping, Optional, Sequence
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING, ReturnDocument

from assignment_portal.database.assignment_repo import AssignmentRepo
from assignment_portal.database.mongo_errors import storage_guard
from assignment_portal.schemas.assignment import Assignment


class MongoAssignmentRepository(AssignmentRepo):
    def __init__(self, db: AsyncIOMotorDatabase):
        self.col = db["assignments"]

    def _from_doc(self, d: dict) -> Assignment:
        base = {k: v for k, v in d.items() if k not in {"_id"}}
        return Assignment(**base)

    def _to_doc_from_model(self, a: Assignment) -> dict:
        doc = a.model_dump()
        if doc.get("updatedAt") is None:
            doc["updatedAt"] = doc["createdAt"]
        return doc

    async def insert(self, assignment: Assignment) -> Assignment:
        doc = self._to_doc_from_model(assignment)
        with storage_guard("insert assignment"):
            await self.col.insert_one(doc)
        return self._from_doc(doc)

    async def find_one(self, assignment_id: str) -> Optional[Assignment]:
        with storage_guard("find assignment"):
            d = await self.col.find_one({"assignmentId": str(assignment_id)})
        return self._from_doc(d) if d else None

    async def find(self, created_by: Optional[str] = None, status: Optional[str] = None) -> Sequence[Assignment]:
        filt: dict = {}
        if created_by is not None:
            filt["createdBy"] = str(created_by)
        if status is not None:
            filt["status"] = status
        with storage_guard("find assignments"):
            cursor = self.col.find(filt).sort("createdAt", DESCENDING)
            docs: List[dict] = [d async for d in cursor]
        return [self._from_doc(d) for d in docs]

    async def update_fields(
        self, assignment_id: str, fields: Mapping[str, Any], expected_status: str
    ) -> Optional[Assignment]:
        with storage_guard("update assignment"):
            d = await self.col.find_one_and_update(
                {"assignmentId": str(assignment_id), "status": expected_status},
                {"$set": dict(fields)},
                return_document=ReturnDocument.AFTER,
            )
        return self._from_doc(d) if d else None

    async def update_status(
        self, assignment_id: str, expected_status: str, new_status: str, updated_at: datetime
    ) -> Optional[Assignment]:
        # il filtro sullo stato letto rende la transizione un compare-and-swap
        with storage_guard("update assignment status"):
            d = await self.col.find_one_and_update(
                {"assignmentId": str(assignment_id), "status": expected_status},
                {"$set": {"status": new_status, "updatedAt": updated_at}},
                return_document=ReturnDocument.AFTER,
            )
        return self._from_doc(d) if d else None

    async def delete(self, assignment_id: str, expected_status: str) -> bool:
        with storage_guard("delete assignment"):
            res = await self.col.delete_one({"assignmentId": str(assignment_id), "status": expected_status})
        return res.deleted_count > 0

    async def ensure_indexes(self):
        await self.col.create_index("assignmentId", unique=True)
        await self.col.create_index("createdBy")
        await self.col.create_index([("status", ASCENDING), ("createdAt", DESCENDING)])

# assignment_portal/database/mongo_submission.py
from typing import List, Optional, Sequence
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError

from assignment_portal.database.mongo_errors import storage_guard
from assignment_portal.database.submission_repo import SubmissionRepo
from assignment_portal.schemas.submission import Submission


class MongoSubmissionRepository(SubmissionRepo):
    def __init__(self, db: AsyncIOMotorDatabase):
        self.col = db["submissions"]

    def _from_doc(self, d: dict) -> Submission:
        base = {k: v for k, v in d.items() if k not in {"_id"}}
        return Submission(**base)

    async def insert_if_absent(self, submission: Submission) -> Optional[Submission]:
        """
        L'unicità della coppia è garantita dall'indice unico: niente
        find-then-insert, due inserimenti concorrenti non possono riuscire entrambi.
        """
        doc = submission.model_dump()
        with storage_guard("insert submission"):
            try:
                await self.col.insert_one(doc)
            except DuplicateKeyError:
                return None
        return self._from_doc(doc)

    async def find_one(self, submission_id: str) -> Optional[Submission]:
        with storage_guard("find submission"):
            d = await self.col.find_one({"submissionId": str(submission_id)})
        return self._from_doc(d) if d else None

    async def _find(self, filt: dict) -> Sequence[Submission]:
        with storage_guard("find submissions"):
            cursor = self.col.find(filt).sort("submittedAt", DESCENDING)
            docs: List[dict] = [d async for d in cursor]
        return [self._from_doc(d) for d in docs]

    async def find_by_assignment(self, assignment_id: str) -> Sequence[Submission]:
        return await self._find({"assignmentId": str(assignment_id)})

    async def find_by_student(self, student_id: str) -> Sequence[Submission]:
        return await self._find({"studentId": str(student_id)})

    async def count_for_assignment(self, assignment_id: str) -> int:
        with storage_guard("count submissions"):
            return await self.col.count_documents({"assignmentId": str(assignment_id)})

    async def mark_reviewed(self, submission_id: str) -> Optional[Submission]:
        with storage_guard("mark submission reviewed"):
            d = await self.col.find_one_and_update(
                {"submissionId": str(submission_id)},
                {"$set": {"reviewed": True}},
                return_document=ReturnDocument.AFTER,
            )
        return self._from_doc(d) if d else None

    async def ensure_indexes(self):
        await self.col.create_index("submissionId", unique=True)
        await self.col.create_index([("assignmentId", ASCENDING), ("studentId", ASCENDING)], unique=True)
        await self.col.create_index("assignmentId")
        await self.col.create_index("studentId")

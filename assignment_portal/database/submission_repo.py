from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Sequence
from assignment_portal.schemas.submission import Submission


class SubmissionRepo(ABC):
    @abstractmethod
    async def insert_if_absent(self, submission: Submission) -> Optional[Submission]:
        """Inserimento atomico vincolato all'unicità di (assignmentId, studentId).
        Ritorna None se esiste già una submission per la coppia."""
        raise NotImplementedError

    @abstractmethod
    async def find_one(self, submission_id: str) -> Optional[Submission]:
        raise NotImplementedError

    @abstractmethod
    async def find_by_assignment(self, assignment_id: str) -> Sequence[Submission]:
        """Submission di un assignment, dalla più recente."""
        raise NotImplementedError

    @abstractmethod
    async def find_by_student(self, student_id: str) -> Sequence[Submission]:
        """Submission di uno studente, dalla più recente."""
        raise NotImplementedError

    @abstractmethod
    async def count_for_assignment(self, assignment_id: str) -> int:
        raise NotImplementedError

    @abstractmethod
    async def mark_reviewed(self, submission_id: str) -> Optional[Submission]:
        """Imposta reviewed=True. Ritorna la submission aggiornata o None se non esiste."""
        raise NotImplementedError

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Mapping, Optional, Sequence
from assignment_portal.schemas.assignment import Assignment


class AssignmentRepo(ABC):
    @abstractmethod
    async def insert(self, assignment: Assignment) -> Assignment:
        """Inserisce un assignment completo (id già generato nel service)."""
        raise NotImplementedError

    @abstractmethod
    async def find_one(self, assignment_id: str) -> Optional[Assignment]:
        """Ritorna un assignment per ID, oppure None se non esiste."""
        raise NotImplementedError

    @abstractmethod
    async def find(self, created_by: Optional[str] = None, status: Optional[str] = None) -> Sequence[Assignment]:
        """Ritorna gli assignment che rispettano il filtro, dal più recente."""
        raise NotImplementedError

    @abstractmethod
    async def update_fields(
        self, assignment_id: str, fields: Mapping[str, Any], expected_status: str
    ) -> Optional[Assignment]:
        """Aggiorna i campi solo se lo stato salvato è ancora expected_status.
        Ritorna l'assignment aggiornato, oppure None se la condizione non è rispettata."""
        raise NotImplementedError

    @abstractmethod
    async def update_status(
        self, assignment_id: str, expected_status: str, new_status: str, updated_at: datetime
    ) -> Optional[Assignment]:
        """Transizione condizionata (compare-and-swap sullo stato).
        Ritorna None se lo stato salvato non coincide più con expected_status."""
        raise NotImplementedError

    @abstractmethod
    async def delete(self, assignment_id: str, expected_status: str) -> bool:
        """Cancella un assignment se è ancora in expected_status. Ritorna True se qualcosa è stato cancellato."""
        raise NotImplementedError

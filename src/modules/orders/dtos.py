"""Order status history DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Serializers)
and the Service layer.  DTOs are immutable (``frozen=True``).
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from modules.orders.constants import CustomerNotified


class UpdateStatusHistoryDTO(BaseModel):
    """Immutable DTO for a status history update request.

    ``status_id`` of ``None`` keeps the order's current status.
    """

    model_config = ConfigDict(frozen=True)

    comment: Optional[str] = None
    status_id: Optional[int] = None
    notify: int = CustomerNotified.HIDDEN
    email_subject: Optional[str] = None
    email_text: Optional[str] = None
    updated_by: Optional[str] = None

    @field_validator("status_id")
    @classmethod
    def status_must_be_positive(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 1:
            raise ValueError("status_id must be a positive integer.")
        return v

    def as_service_kwargs(self) -> Dict[str, Any]:
        return self.model_dump()

"""Pydantic schemas for insurance form records."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# SQLite INTEGER range
MIN_FORM_ID = -(2**63)
MAX_FORM_ID = 2**63 - 1


class InsuranceForm(BaseModel):
    """An insurance form record.

    Only the identifier is modelled. Every other field the client sends is
    kept as-is and returned unchanged.

    Attributes:
        id: Store-assigned identifier, None until the record is persisted.
    """

    model_config = ConfigDict(extra="allow")

    id: int | None = Field(
        default=None,
        ge=MIN_FORM_ID,
        le=MAX_FORM_ID,
        description="Store-assigned identifier",
    )

    def fields(self) -> dict[str, Any]:
        """Return the client-supplied fields without the identifier."""
        return dict(self.model_extra or {})

    def with_id(self, form_id: int) -> "InsuranceForm":
        """Return a copy of this form carrying ``form_id``."""
        return InsuranceForm(id=form_id, **self.fields())

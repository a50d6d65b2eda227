"""Insurance form records and their system of record."""

from forms_api.forms.repository import FormRepository, SqliteFormRepository
from forms_api.forms.schemas import InsuranceForm

__all__ = [
    "FormRepository",
    "InsuranceForm",
    "SqliteFormRepository",
]

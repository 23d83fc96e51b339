from __future__ import annotations

import uuid
from datetime import date

from sqlalchemy import Date, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, validates

from patient_service.core.db import Base

NAME_MAX_LENGTH = 100
EMAIL_MAX_LENGTH = 255


class Patient(Base):
    __tablename__ = "patients"

    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), nullable=False, index=True)
    # Unique index backs up the service-level duplicate check under concurrent writes.
    email: Mapped[str] = mapped_column(String(EMAIL_MAX_LENGTH), nullable=False, unique=True)
    # Casefolded copy of `email` for case-insensitive lookups. SQL lower() is ASCII-only
    # on some backends (SQLite), so the folding happens here instead.
    email_key: Mapped[str] = mapped_column(String(EMAIL_MAX_LENGTH), nullable=False, index=True)
    address: Mapped[str] = mapped_column(Text, nullable=False)
    date_of_birth: Mapped[date] = mapped_column(Date, nullable=False)
    registered_date: Mapped[date] = mapped_column(Date, nullable=False)

    @validates("email")
    def _sync_email_key(self, _key: str, value: str) -> str:
        self.email_key = fold_email(value)
        return value

    def __repr__(self) -> str:
        # Only the id: the other columns are patient data.
        return f"Patient(id={self.id!s})"


def fold_email(email: str) -> str:
    return email.casefold()

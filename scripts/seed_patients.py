"""Seed patient data for local development.

Safe to run repeatedly:
- It only runs when APP_ENV=development
- It inserts rows only when the patients table is empty
"""

# ruff: noqa: I001
from __future__ import annotations

import asyncio
import logging
import uuid
from datetime import date

from sqlalchemy import func, select

from patient_service.core.db import create_engine, create_sessionmaker
from patient_service.core.logging import setup_logging
from patient_service.core.settings import get_settings
from patient_service.patients.models import Patient

logger = logging.getLogger("scripts.seed_patients")

# Deterministic ids so repeated seeds against fresh databases match.
_SEED_NAMESPACE = uuid.UUID("6f1c3e2a-4d7b-4b8e-9a51-0c2d7e8f9a10")


def _seed_rows() -> list[dict]:
    """Return a deterministic set of patient seed rows."""
    rows = [
        ("Ada Lovelace", "ada.lovelace@clinic.org", "12 St James's Sq, London", date(1815, 12, 10)),
        ("Alan Turing", "alan.turing@clinic.org", "43 Adlington Road, Wilmslow", date(1912, 6, 23)),
        ("Grace Hopper", "grace.hopper@clinic.org", "1 Navy Yard, Arlington", date(1906, 12, 9)),
        ("Katherine Johnson", "k.johnson@clinic.org", "8 Langley Way, Hampton", date(1918, 8, 26)),
        ("Margaret Hamilton", "m.hamilton@clinic.org", "55 Tech Sq, Cambridge", date(1936, 8, 17)),
        ("Edsger Dijkstra", "e.dijkstra@clinic.org", "3 Plantage, Nuenen", date(1930, 5, 11)),
        ("Barbara Liskov", "b.liskov@clinic.org", "32 Vassar Street, Cambridge", date(1939, 11, 7)),
        ("Dennis Ritchie", "d.ritchie@clinic.org", "600 Mountain Ave, NJ", date(1941, 9, 9)),
    ]
    registered = date(2024, 1, 15)
    return [
        {
            "id": uuid.uuid5(_SEED_NAMESPACE, email),
            "name": name,
            "email": email,
            "address": address,
            "date_of_birth": dob,
            "registered_date": registered,
        }
        for name, email, address, dob in rows
    ]


async def seed_patients_if_empty(*, database_url: str) -> int:
    """Insert the seed patients if the table is empty; return how many were inserted."""
    engine = create_engine(database_url=database_url)
    sessionmaker = create_sessionmaker(engine=engine)
    try:
        async with sessionmaker() as session:
            total = int(
                (await session.execute(select(func.count()).select_from(Patient))).scalar_one()
            )
            if total > 0:
                logger.info("Seed skipped: patients table already has %s row(s)", total)
                return 0

            patients = [Patient(**row) for row in _seed_rows()]
            session.add_all(patients)
            await session.commit()
            logger.info("Seeded %s patients", len(patients))
            return len(patients)
    finally:
        await engine.dispose()


def main() -> None:
    """Entry point."""
    setup_logging()
    settings = get_settings()
    if not settings.is_development:
        logger.info("Seed skipped: seeding only runs with APP_ENV=development")
        return

    asyncio.run(seed_patients_if_empty(database_url=settings.database_url))


if __name__ == "__main__":
    main()

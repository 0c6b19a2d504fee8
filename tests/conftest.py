"""
Shared fixtures: an in-memory SQLite database with the dashboard tables and
a small, fully known data set for two clients. One LSA spend row is negative
and is reported as a data-integrity warning.
"""

from __future__ import annotations

from collections.abc import Iterator
from datetime import date

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.routers import dashboard_router
from db.base import Base
from db.models import (
    AICallRecord,
    ClientSettings,
    GoogleAdsCampaignData,
    Lead,
    LSASpend,
    SEOSpend,
)
from db.session import get_db

ACME = 1
BAYSIDE = 2


def _memory_engine():
    return create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


def _seed(session: Session) -> None:
    session.add_all(
        [
            ClientSettings(
                client_id=ACME,
                cr_client_id="cr-001",
                cr_company_name="Acme Plumbing",
                ppc_sources=["Google Ads"],
                lsa_sources=["LSA"],
                seo_sources=["GMB"],
            ),
            ClientSettings(client_id=BAYSIDE, cr_company_name=None),
        ]
    )
    session.add_all(
        [
            Lead(client_id=ACME, first_qual_date=date(2024, 1, 5), first_lead_source="Google Ads",
                 hmstr_qualified_lead=True, lead_score_max=80, close_score_max=40, spc="ppc"),
            Lead(client_id=ACME, first_qual_date=date(2024, 1, 5), first_lead_source="LSA",
                 hmstr_qualified_lead=True, lead_score_max=60, close_score_max=20, spc="lsa"),
            Lead(client_id=ACME, first_qual_date=date(2024, 1, 6), first_lead_source="GMB",
                 hmstr_qualified_lead=True, lead_score_max=40, close_score_max=30, spc="seo"),
            Lead(client_id=ACME, first_qual_date=date(2024, 1, 6), first_lead_source="Referral",
                 hmstr_qualified_lead=True, lead_score_max=20, close_score_max=10, spc=None),
            Lead(client_id=ACME, first_qual_date=date(2024, 1, 6), first_lead_source="LSA",
                 hmstr_qualified_lead=False, lead_score_max=90, close_score_max=90, spc="lsa"),
            Lead(client_id=ACME, first_qual_date=date(2023, 12, 31), first_lead_source="LSA",
                 hmstr_qualified_lead=True, lead_score_max=10, close_score_max=10, spc="lsa"),
            Lead(client_id=BAYSIDE, first_qual_date=date(2024, 1, 5), first_lead_source="PPC Pool",
                 hmstr_qualified_lead=True, lead_score_max=70, close_score_max=35, spc="ppc"),
        ]
    )
    session.add_all(
        [
            GoogleAdsCampaignData(google_ads_customer_id=ACME, spend_date=date(2024, 1, 5),
                                  cost_micros=30_000_000),
            GoogleAdsCampaignData(google_ads_customer_id=ACME, spend_date=date(2024, 1, 5),
                                  cost_micros=None),
            GoogleAdsCampaignData(google_ads_customer_id=ACME, spend_date=date(2024, 1, 7),
                                  cost_micros=10_000_000),
            GoogleAdsCampaignData(google_ads_customer_id=BAYSIDE, spend_date=date(2024, 1, 5),
                                  cost_micros=7_000_000),
            LSASpend(client_id=ACME, spend_date=date(2024, 1, 5), spend=50.0),
            LSASpend(client_id=ACME, spend_date=date(2024, 1, 5), spend=-5.0),
            SEOSpend(client_id=ACME, spend_date=date(2024, 1, 6), spend=20.0),
            SEOSpend(client_id=ACME, spend_date=date(2024, 2, 1), spend=999.0),
        ]
    )
    session.add_all(
        [
            AICallRecord(client_id=ACME, action_date=date(2024, 1, 5), human_engaged=True),
            AICallRecord(client_id=ACME, action_date=date(2024, 1, 6), human_engaged=False),
            AICallRecord(client_id=ACME, action_date=date(2024, 1, 6), human_engaged=None),
            AICallRecord(client_id=ACME, action_date=date(2024, 1, 7), human_engaged=True),
        ]
    )
    session.commit()


@pytest.fixture()
def session_factory() -> Iterator[sessionmaker]:
    engine = _memory_engine()
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    with factory() as session:
        _seed(session)
    yield factory
    engine.dispose()


@pytest.fixture()
def db_session(session_factory) -> Iterator[Session]:
    with session_factory() as session:
        yield session


@pytest.fixture()
def broken_session() -> Iterator[Session]:
    """Session on a database with no tables; every read fails."""
    engine = _memory_engine()
    with Session(engine) as session:
        yield session
    engine.dispose()


def _client_for(session_source) -> TestClient:
    app = FastAPI()
    app.include_router(dashboard_router)

    def override_get_db():
        db = session_source()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture()
def client(session_factory) -> Iterator[TestClient]:
    with _client_for(session_factory) as test_client:
        yield test_client


@pytest.fixture()
def broken_client() -> Iterator[TestClient]:
    engine = _memory_engine()
    with _client_for(sessionmaker(bind=engine)) as test_client:
        yield test_client
    engine.dispose()

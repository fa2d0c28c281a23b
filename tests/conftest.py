"""Test configuration and fixtures."""

from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import Engine
from sqlalchemy.orm import Session, sessionmaker

from artwork_registry.api import app
from artwork_registry.catalog.character import CharacterUpsert
from artwork_registry.catalog.services import (
    ArtistService,
    ArtworkStore,
    CharacterService,
    PromotionService,
    UsageIndex,
)
from artwork_registry.db.base import build_engine, create_tables, get_db


@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    """Fresh in-memory database with every table created."""
    engine = build_engine("sqlite:///:memory:")
    create_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(engine) -> Generator[Session, None, None]:
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    yield session
    session.close()


@pytest.fixture
def client(engine) -> Generator[TestClient, None, None]:
    """API client whose requests use the test database."""
    session_local = sessionmaker(bind=engine, autocommit=False, autoflush=False)

    def override_get_db():
        db = session_local()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def store(db_session) -> ArtworkStore:
    return ArtworkStore(db_session)


@pytest.fixture
def index(db_session) -> UsageIndex:
    return UsageIndex(db_session)


@pytest.fixture
def artists(db_session) -> ArtistService:
    return ArtistService(db_session)


@pytest.fixture
def characters(db_session) -> CharacterService:
    return CharacterService(db_session)


@pytest.fixture
def promotion(db_session, store, index, characters) -> PromotionService:
    return PromotionService(db_session, artworks=store, usages=index, characters=characters)


@pytest.fixture
def trapper(characters):
    """A killer with a portrait and two gallery images embedded directly."""
    return characters.upsert(
        "killer",
        "trapper",
        CharacterUpsert(
            name="The Trapper",
            order=1,
            image_url="https://cdn.example/trapper/portrait.png",
            artist_urls=[
                "https://cdn.example/trapper/fan-1.png",
                "https://cdn.example/trapper/fan-2.png",
            ],
        ),
    )

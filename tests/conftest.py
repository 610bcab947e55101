import os

# keep the module-level engine off the working directory
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from golftrip.db import Base, get_db
from golftrip.main import app
from golftrip.scoring import CourseInfo, HoleInfo

# par 72, stroke index 7 on the first hole
PARS = [4, 4, 3, 5, 4, 4, 3, 4, 5, 4, 3, 4, 5, 4, 4, 3, 5, 4]
STROKE_INDEX = [7, 3, 15, 1, 11, 5, 17, 9, 13, 8, 16, 2, 12, 4, 10, 18, 6, 14]


def course_holes():
    return [
        {"number": n, "par": par, "stroke_index": si, "yardage": 300 + 10 * n}
        for n, (par, si) in enumerate(zip(PARS, STROKE_INDEX), start=1)
    ]


def course_info(course_id=1):
    return CourseInfo(
        id=course_id,
        name="Quinta do Lago",
        par_total=sum(PARS),
        holes=tuple(HoleInfo(**h) for h in course_holes()),
    )


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()

"""
Pytest fixtures

Each test gets its own file-backed SQLite database so that several threads
can open independent sessions against it.
"""
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from polimarket.core import Base, get_db
from polimarket.core.database import build_engine
from polimarket.schemas.hr import EmployeeCreate
from polimarket.schemas.product import ProductCreate
from polimarket.schemas.seller import SellerCreate
from polimarket.services import BusinessFacade, KeyedLocks


@pytest.fixture
def engine(tmp_path):
    test_engine = build_engine(f"sqlite:///{tmp_path / 'polimarket_test.db'}")
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def locks():
    return KeyedLocks()


@pytest.fixture
def facade(db, locks):
    return BusinessFacade(db, locks=locks)


@pytest.fixture
def product(facade):
    """Active product P100 with stock 10, thresholds 2..50"""
    result = facade.create_product(ProductCreate(
        id="P100",
        name="Arroz Test 500g",
        price=Decimal("3500"),
        category="Alimentos Básicos",
        stock=10,
        min_stock=2,
        max_stock=50,
        unit_of_measure="Paquete"
    ), performed_by="tester")
    assert result.success, result.message
    return result.data


@pytest.fixture
def hr_employee(facade):
    result = facade.create_employee(EmployeeCreate(
        id="HR001", name="Ana García Rodríguez", role="Gerente de Recursos Humanos"
    ))
    assert result.success, result.message
    return result.data


@pytest.fixture
def inactive_employee(facade):
    result = facade.create_employee(EmployeeCreate(
        id="HR009", name="Pedro Retirado", role="Analista de Recursos Humanos"
    ))
    assert result.success, result.message
    assert facade.deactivate_employee("HR009").success
    return result.data


@pytest.fixture
def pending_seller(facade):
    result = facade.create_seller(SellerCreate(
        code="V006", name="Claudia Patricia Jiménez", territory="Cartagena Bolívar", commission=Decimal("5.7")
    ))
    assert result.success, result.message
    return result.data


@pytest.fixture
def client(session_factory):
    from main import app

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()

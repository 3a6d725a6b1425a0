"""
Demo data seeding
"""
from polimarket.models import AuthorizationState, InventoryMovement, Seller
from polimarket.seed import seed_database


def test_seed_loads_demo_data(db, facade):
    counts = seed_database(db)

    assert counts == {
        "hr_employees": 5,
        "sellers": 9,
        "authorized_sellers": 6,
        "products": 8,
        "demo_seller": True,
    }

    demo = facade.get_seller("DEMO").data
    assert demo.state == AuthorizationState.AUTHORIZED
    assert demo.approved_by == "HR001"

    assert facade.validate_seller("V003").data.reason == "Seller V003 authorized by HR002"
    assert [s.code for s in facade.list_pending_sellers().data] == ["V006", "V007", "V008"]


def test_seeded_stock_is_opened_through_the_ledger(db, facade):
    seed_database(db)

    assert facade.current_stock("P001").data == 150
    history = facade.movement_history("P001").data
    assert len(history) == 1
    assert history[0].movement_type == "INBOUND"
    assert history[0].performed_by == "seeder"

    for product in facade.list_products().data["products"]:
        assert facade.verify_ledger(product.id).data.is_consistent


def test_seed_twice_adds_nothing(db):
    first = seed_database(db)
    movements = db.query(InventoryMovement).count()

    second = seed_database(db)

    assert second == first
    assert db.query(InventoryMovement).count() == movements
    assert db.query(Seller).filter(Seller.is_authorized == True).count() == 6

"""
Database Seeder

Loads demo HR employees, sellers and products through the BusinessFacade.
Each group is skipped when its sentinel record (HR001, DEMO, P001) exists,
so running it on every startup is safe.

Usage: python -m polimarket.seed
"""
from datetime import timedelta
from decimal import Decimal
import logging

from sqlalchemy.orm import Session

from polimarket.core import Base, SessionLocal, engine
from polimarket.core.logging import configure_logging
from polimarket.models import HREmployee, Product, Seller
from polimarket.models.base import utcnow
from polimarket.schemas.hr import EmployeeCreate
from polimarket.schemas.product import ProductCreate
from polimarket.schemas.seller import SellerCreate
from polimarket.services.business_facade import BusinessFacade

logger = logging.getLogger(__name__)

SEED_USER = "seeder"

HR_EMPLOYEES = [
    # id, name, role, email, phone, days employed
    ("HR001", "Ana García Rodríguez", "Gerente de Recursos Humanos", "ana.garcia@polimarket.com", "+57 300 123 4567", 3 * 365),
    ("HR002", "Carlos López Martínez", "Analista de Recursos Humanos", "carlos.lopez@polimarket.com", "+57 300 234 5678", 2 * 365),
    ("HR003", "María Elena Vargas", "Coordinadora de Selección", "maria.vargas@polimarket.com", "+57 300 345 6789", 365),
    ("HR004", "Jorge Andrés Ruiz", "Especialista en Capacitación", "jorge.ruiz@polimarket.com", "+57 300 456 7890", 240),
    ("HR005", "Laura Patricia Sánchez", "Asistente de RH", "laura.sanchez@polimarket.com", "+57 300 567 8901", 180),
]

SELLERS = [
    # code, name, territory, commission, approving HR employee (None = pending)
    ("V001", "Juan Carlos Pérez", "Bogotá Norte", "5.5", "HR001"),
    ("V002", "Sandra Milena Torres", "Bogotá Sur", "6.0", "HR001"),
    ("V003", "Miguel Ángel Ramírez", "Medellín Centro", "5.8", "HR002"),
    ("V004", "Diana Carolina Herrera", "Cali Valle", "6.2", "HR002"),
    ("V005", "Andrés Felipe Morales", "Barranquilla Atlántico", "5.9", "HR003"),
    ("V006", "Claudia Patricia Jiménez", "Cartagena Bolívar", "5.7", None),
    ("V007", "Roberto Carlos Mendoza", "Bucaramanga Santander", "6.1", None),
    ("V008", "Paola Andrea Castillo", "Pereira Risaralda", "5.6", None),
    ("DEMO", "Vendedor Demo", "Nacional", "5.0", "HR001"),
]

PRODUCTS = [
    # id, name, description, price, category, stock, min, max, unit
    ("P001", "Arroz Diana Premium 500g", "Arroz blanco de alta calidad, grano largo", "3500", "Alimentos Básicos", 150, 20, 500, "Paquete"),
    ("P002", "Aceite Girasol 1L", "Aceite de girasol refinado para cocina", "8900", "Alimentos Básicos", 80, 15, 200, "Botella"),
    ("P003", "Leche Entera Alpina 1L", "Leche entera pasteurizada", "4200", "Lácteos", 120, 25, 300, "Tetrapack"),
    ("P004", "Pan Tajado Bimbo 450g", "Pan de molde tajado integral", "5600", "Panadería", 60, 10, 150, "Paquete"),
    ("P005", "Coca Cola 2L", "Bebida gaseosa sabor cola", "6800", "Bebidas", 200, 30, 400, "Botella"),
    ("P006", "Detergente Ariel 1kg", "Detergente en polvo para ropa", "12500", "Limpieza", 90, 15, 200, "Caja"),
    ("P007", "Jabón Rey 300g", "Jabón de tocador antibacterial", "2800", "Aseo Personal", 180, 25, 350, "Barra"),
    ("P008", "Papel Higiénico Scott 4 rollos", "Papel higiénico doble hoja", "8900", "Aseo Personal", 75, 12, 180, "Paquete"),
]


def _report(label: str, key: str, result) -> bool:
    if not result.success:
        logger.error(f"Seeding {label} {key} failed [{result.error_code}]: {result.message}")
    return result.success


def seed_hr_employees(facade: BusinessFacade) -> int:
    if facade.store.exists(HREmployee, "HR001"):
        logger.info("HR001 employee exists. Skipping HR seeding.")
        return 0

    count = 0
    now = utcnow()
    for emp_id, name, role, email, phone, days in HR_EMPLOYEES:
        result = facade.create_employee(EmployeeCreate(
            id=emp_id,
            name=name,
            role=role,
            department="Recursos Humanos",
            email=email,
            phone=phone,
            hired_at=now - timedelta(days=days)
        ))
        count += _report("HR employee", emp_id, result)
    logger.info(f"Added {count} HR employees")
    return count


def seed_sellers(facade: BusinessFacade) -> int:
    if facade.store.exists(Seller, "DEMO"):
        logger.info("DEMO seller exists. Skipping sellers seeding.")
        return 0

    count = 0
    for code, name, territory, commission, approver in SELLERS:
        result = facade.create_seller(SellerCreate(
            code=code, name=name, territory=territory, commission=Decimal(commission)
        ))
        if not _report("seller", code, result):
            continue
        count += 1
        if approver:
            _report("authorization of", code, facade.authorize_seller(code, approver))
    logger.info(f"Added {count} sellers")
    return count


def seed_products(facade: BusinessFacade) -> int:
    if facade.store.exists(Product, "P001"):
        logger.info("P001 product exists. Skipping products seeding.")
        return 0

    count = 0
    for prod_id, name, description, price, category, stock, min_stock, max_stock, unit in PRODUCTS:
        result = facade.create_product(ProductCreate(
            id=prod_id,
            name=name,
            description=description,
            price=Decimal(price),
            category=category,
            stock=stock,
            min_stock=min_stock,
            max_stock=max_stock,
            unit_of_measure=unit
        ), performed_by=SEED_USER)
        count += _report("product", prod_id, result)
    logger.info(f"Added {count} products")
    return count


def verify_seed(facade: BusinessFacade) -> dict:
    """Count seeded rows and warn about anything missing"""
    db = facade.db
    counts = {
        "hr_employees": db.query(HREmployee).count(),
        "sellers": db.query(Seller).count(),
        "authorized_sellers": db.query(Seller).filter(Seller.is_authorized == True).count(),
        "products": db.query(Product).count(),
        "demo_seller": facade.store.exists(Seller, "DEMO"),
    }
    logger.info(f"Seed data verification: {counts}")

    if counts["hr_employees"] == 0:
        logger.warning("No HR employees found - seller authorization will not work")
    if counts["authorized_sellers"] == 0:
        logger.warning("No authorized sellers found")
    if counts["products"] == 0:
        logger.warning("No products found")
    if not counts["demo_seller"]:
        logger.warning("DEMO seller not found")
    return counts


def seed_database(db: Session) -> dict:
    """Seed every group in dependency order: HR employees before sellers"""
    facade = BusinessFacade(db)
    logger.info("Starting database seeding...")
    seed_hr_employees(facade)
    seed_sellers(facade)
    seed_products(facade)
    counts = verify_seed(facade)
    logger.info("Database seeding completed")
    return counts


if __name__ == "__main__":
    configure_logging()
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        seed_database(session)
    finally:
        session.close()

import logging
from datetime import datetime, timezone

from sqlmodel import select

from config import FRONTEND_URL
from database import get_session
from services.errors import ValidationError
from storemodel.store_model import Contact, CustomerInfo, Discount, Product

logger = logging.getLogger("storefront_api.store")

MIN_CHECKOUT_ITEMS = 2
MIN_CHECKOUT_TOTAL = 15


def create_product(product: Product) -> Product:
    with get_session() as session:
        session.add(product)
        session.commit()
        session.refresh(product)
    logger.info(f"Product uploaded: {product.name}")
    return product


def list_products() -> list[Product]:
    with get_session() as session:
        return list(session.exec(select(Product)).all())


def create_discount(discount: Discount) -> Discount:
    with get_session() as session:
        session.add(discount)
        session.commit()
        session.refresh(discount)
    logger.info(f"Discount added: {discount.code}")
    return discount


def list_discounts() -> list[Discount]:
    with get_session() as session:
        return list(session.exec(select(Discount)).all())


def create_contact(contact: Contact) -> Contact:
    with get_session() as session:
        session.add(contact)
        session.commit()
        session.refresh(contact)
    return contact


def list_contacts() -> list[Contact]:
    """Contacts, newest first."""
    with get_session() as session:
        stmt = select(Contact).order_by(Contact.created_at.desc(), Contact.id.desc())
        return list(session.exec(stmt).all())


def get_customer_info(email: str) -> CustomerInfo | None:
    with get_session() as session:
        return session.exec(select(CustomerInfo).where(CustomerInfo.email == email)).first()


def save_customer_info(email: str, fields: dict) -> CustomerInfo:
    with get_session() as session:
        info = session.exec(select(CustomerInfo).where(CustomerInfo.email == email)).first()
        if info is None:
            info = CustomerInfo(email=email, **fields)
        else:
            for key, value in fields.items():
                setattr(info, key, value)
            info.updated_at = datetime.now(timezone.utc)
        session.add(info)
        session.commit()
        session.refresh(info)
    logger.info(f"Customer info saved for email={email}")
    return info


def create_mock_checkout_session(items: list[dict]) -> dict:
    """
    Validate a cart and return a fake payment session.

    Raises:
        ValidationError: If the cart is empty, too small, or below the minimum total
    """
    if not items:
        raise ValidationError("Cart is empty. Please add items to cart.")
    if len(items) < MIN_CHECKOUT_ITEMS:
        raise ValidationError(
            f"Insufficient items for checkout. Minimum {MIN_CHECKOUT_ITEMS} items required."
        )

    total_amount = sum(item["price"] * item["qty"] for item in items)
    if total_amount < MIN_CHECKOUT_TOTAL:
        raise ValidationError("Total amount is too low for checkout.")

    return {
        "sessionId": "mock_session_id_123456",
        "message": "This is a mock payment session",
        "totalAmount": total_amount,
        "paymentUrl": f"{FRONTEND_URL}/success",
        "cancelUrl": f"{FRONTEND_URL}/cancel",
    }

"""Payment recording and membership lookup."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from .app_sessions import IdentitySnapshot
from .db import get_session
from .errors import StorageFault, ValidationError
from .models import Payment
from .request_data import text

log = logging.getLogger("studio.payments")

PAYMENT_METHODS = ("UPI", "Credit", "Debit")


def mask_card(number: str) -> str:
    digits = "".join(ch for ch in number if ch.isdigit())
    return "**** **** **** " + digits[-4:] if digits else ""


@dataclass(frozen=True)
class PaymentRequest:
    phone: str
    amount: float
    method: str
    upi_id: str | None = None
    card_number: str | None = None
    expiry: str | None = None

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> PaymentRequest:
        method = text(data, "paymentMethod")
        if method not in PAYMENT_METHODS:
            raise ValidationError("Invalid payment method")
        try:
            amount = float(text(data, "amount"))
        except ValueError:
            raise ValidationError("A numeric amount is required.") from None
        if not math.isfinite(amount) or amount <= 0:
            raise ValidationError("Amount must be a positive number.")
        phone = text(data, "phone")
        if method == "UPI":
            upi_id = text(data, "upiId")
            if not upi_id:
                raise ValidationError("UPI ID is required for UPI payments.")
            return cls(phone=phone, amount=amount, method=method, upi_id=upi_id)
        card_number, expiry = text(data, "cardNumber"), text(data, "expiry")
        # The security code is checked for presence and then discarded
        if not card_number or not expiry or not text(data, "cvv"):
            raise ValidationError("Card number, expiry and CVV are required for card payments.")
        if not any(ch.isdigit() for ch in card_number):
            raise ValidationError("Card number must contain digits.")
        return cls(phone=phone, amount=amount, method=method, card_number=mask_card(card_number), expiry=expiry)


def serialize_payment(p: Payment) -> dict[str, Any]:
    return {
        "id": p.id,
        "name": p.name,
        "email": p.email,
        "phone": p.phone,
        "amount": p.amount,
        "paymentMethod": p.payment_method,
        "upiId": p.upi_id,
        "cardNumber": p.card_number,
        "expiry": p.expiry,
        "status": p.status,
        "date": p.date.isoformat() if p.date else None,
    }


class PaymentService:
    def record(self, payer: IdentitySnapshot, req: PaymentRequest) -> dict[str, Any]:
        """Store a payment on behalf of the logged-in payer."""
        db = get_session()
        try:
            payment = Payment(
                name=payer.get("name"),
                email=payer.get("email"),
                phone=req.phone or None,
                amount=req.amount,
                payment_method=req.method,
                upi_id=req.upi_id,
                card_number=req.card_number,
                expiry=req.expiry,
            )
            db.add(payment)
            db.commit()
            log.info("payment recorded id=%s method=%s user_id=%s", payment.id, payment.payment_method, payer["user_id"])
            return serialize_payment(payment)
        except SQLAlchemyError as e:
            db.rollback()
            raise StorageFault(f"payment insert failed: {e}") from e
        finally:
            db.close()

    def has_membership(self, name: str, phone: str) -> bool:
        if not name or not phone:
            raise ValidationError("Name and phone are required.")
        db = get_session()
        try:
            row = db.execute(
                select(Payment.id).where(Payment.name == name, Payment.phone == phone).limit(1)
            ).first()
            return row is not None
        except SQLAlchemyError as e:
            raise StorageFault(f"membership lookup failed: {e}") from e
        finally:
            db.close()

    def list_all(self) -> list[dict[str, Any]]:
        db = get_session()
        try:
            rows = db.execute(select(Payment).order_by(Payment.date.desc())).scalars().all()
            return [serialize_payment(p) for p in rows]
        except SQLAlchemyError as e:
            raise StorageFault(f"payment listing failed: {e}") from e
        finally:
            db.close()


__all__ = ["PAYMENT_METHODS", "PaymentRequest", "PaymentService", "mask_card", "serialize_payment"]

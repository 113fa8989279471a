"""Appointment booking flow.

States::

    received -> trainer_validated -> persisted
        \\               \\
         -> rejected      -> rejected (storage_error)

A booking is attempted exactly once; the caller reports the terminal state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date as _date
from datetime import datetime
from enum import Enum
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from .db import get_session
from .errors import DomainError, StorageFault, ValidationError
from .ident import canonicalize_email
from .models import Appointment, User
from .request_data import text
from .trainers import InvalidKeyFormat, TrainerNotFound, TrainerReferenceValidator

log = logging.getLogger("studio.booking")


def _parse_date(raw: str) -> _date:
    # Date pickers send either a plain date or a full ISO datetime
    try:
        return datetime.fromisoformat(raw).date()
    except ValueError:
        raise ValidationError("A valid appointment date (YYYY-MM-DD) is required.") from None


class BookingState(str, Enum):
    RECEIVED = "received"
    TRAINER_VALIDATED = "trainer_validated"
    PERSISTED = "persisted"
    REJECTED = "rejected"


@dataclass(frozen=True)
class BookingRequest:
    name: str
    email: str
    trainer_id: str
    date: _date
    time: str | None = None
    gender: str | None = None
    age: int | None = None
    appointment_type: str | None = None
    appointment_phone: str | None = None

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> BookingRequest:
        name = text(data, "name")
        email = text(data, "email")
        if not name or not email:
            raise ValidationError("Name and email are required.")
        raw_date = text(data, "date")
        when = _parse_date(raw_date)
        age: int | None = None
        if text(data, "age"):
            try:
                age = int(text(data, "age"))
            except ValueError:
                raise ValidationError("Age must be a whole number.") from None
            if age < 0:
                raise ValidationError("Age must be a whole number.")
        phone = text(data, "appointmentPhone")
        if phone and not phone.lstrip("+").replace(" ", "").isdigit():
            raise ValidationError("Phone number may only contain digits.")
        return cls(
            name=name,
            email=canonicalize_email(email),
            trainer_id=text(data, "trainerId"),
            date=when,
            time=text(data, "time") or None,
            gender=text(data, "gender") or None,
            age=age,
            appointment_type=text(data, "appointmentType") or None,
            appointment_phone=phone or None,
        )


@dataclass
class BookingOutcome:
    state: BookingState
    appointment: dict[str, Any] | None = None
    reason: str | None = None
    error: DomainError | None = None
    history: list[BookingState] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.state is BookingState.PERSISTED

    def raise_if_rejected(self) -> None:
        if self.state is BookingState.REJECTED and self.error is not None:
            raise self.error


def serialize_appointment(appt: Appointment, trainer: dict[str, Any] | None = None) -> dict[str, Any]:
    ref: Any = appt.trainer_id
    if trainer is not None:
        ref = {"id": appt.trainer_id, "name": trainer.get("name")}
    return {
        "id": appt.id,
        "name": appt.name,
        "email": appt.email,
        "trainerId": ref,
        "gender": appt.gender,
        "age": appt.age,
        "date": appt.date.isoformat() if appt.date else None,
        "time": appt.time,
        "appointmentType": appt.appointment_type,
        "appointmentPhone": appt.appointment_phone,
    }


class BookingFlow:
    def __init__(self, validator: TrainerReferenceValidator | None = None):
        self.validator = validator or TrainerReferenceValidator()

    def book(self, req: BookingRequest) -> BookingOutcome:
        outcome = BookingOutcome(state=BookingState.RECEIVED, history=[BookingState.RECEIVED])
        try:
            trainer = self.validator.validate(req.trainer_id)
        except (InvalidKeyFormat, TrainerNotFound) as e:
            log.warning("booking rejected reason=%s trainer_id=%r", e.code, req.trainer_id)
            return self._reject(outcome, e.code, e)
        self._advance(outcome, BookingState.TRAINER_VALIDATED)

        try:
            appt = self._insert(req)
        except StorageFault as e:
            log.error("booking rejected reason=storage_error detail=%s", e.detail)
            return self._reject(outcome, "storage_error", e)
        outcome.appointment = serialize_appointment(appt, trainer)
        self._advance(outcome, BookingState.PERSISTED)
        log.info("booking persisted appointment_id=%s trainer_id=%s date=%s", appt.id, appt.trainer_id, appt.date)
        return outcome

    def list_for_trainer(self, trainer_id: str) -> list[dict[str, Any]]:
        """Appointments of one trainer with the trainer's display name populated."""
        try:
            trainer = self.validator.validate(trainer_id)
        except InvalidKeyFormat:
            raise InvalidKeyFormat("Invalid Trainer ID format") from None
        except TrainerNotFound:
            raise TrainerNotFound("Trainer not found", status=404) from None
        db = get_session()
        try:
            rows = db.execute(
                select(Appointment)
                .where(Appointment.trainer_id == trainer["id"])
                .order_by(Appointment.date, Appointment.time)
            ).scalars().all()
            return [serialize_appointment(a, trainer) for a in rows]
        except SQLAlchemyError as e:
            raise StorageFault(f"appointment listing failed: {e}") from e
        finally:
            db.close()

    def list_all(self) -> list[dict[str, Any]]:
        db = get_session()
        try:
            rows = db.execute(
                select(Appointment, User.name)
                .join(User, User.id == Appointment.trainer_id, isouter=True)
                .order_by(Appointment.date, Appointment.time)
            ).all()
            return [serialize_appointment(a, {"name": name}) for a, name in rows]
        except SQLAlchemyError as e:
            raise StorageFault(f"appointment listing failed: {e}") from e
        finally:
            db.close()

    def _insert(self, req: BookingRequest) -> Appointment:
        db = get_session()
        try:
            appt = Appointment(
                name=req.name,
                email=req.email,
                trainer_id=req.trainer_id,
                gender=req.gender,
                age=req.age,
                date=req.date,
                time=req.time,
                appointment_type=req.appointment_type,
                appointment_phone=req.appointment_phone,
            )
            db.add(appt)
            db.commit()
            return appt
        except SQLAlchemyError as e:
            db.rollback()
            raise StorageFault(f"appointment insert failed: {e}") from e
        finally:
            db.close()

    @staticmethod
    def _advance(outcome: BookingOutcome, state: BookingState) -> None:
        outcome.state = state
        outcome.history.append(state)

    def _reject(self, outcome: BookingOutcome, reason: str, error: DomainError) -> BookingOutcome:
        self._advance(outcome, BookingState.REJECTED)
        outcome.reason = reason
        outcome.error = error
        return outcome


__all__ = [
    "BookingState",
    "BookingRequest",
    "BookingOutcome",
    "BookingFlow",
    "serialize_appointment",
]

"""Appointment booking and listing endpoints."""

from __future__ import annotations

from flask import Blueprint, jsonify, redirect

from .booking_service import BookingFlow, BookingRequest
from .pages import page_url
from .request_data import payload

bp = Blueprint("appointments_api", __name__)

_flow = BookingFlow()


@bp.post("/userappointment")
def book_appointment():
    req = BookingRequest.from_payload(payload())
    outcome = _flow.book(req)
    outcome.raise_if_rejected()
    return redirect(page_url("booking_success"))


@bp.get("/api/appointments")
def list_appointments():
    return jsonify(_flow.list_all())


@bp.get("/trainer/appointments/<trainer_id>")
def trainer_appointments(trainer_id: str):
    return jsonify(_flow.list_for_trainer(trainer_id))

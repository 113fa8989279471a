from __future__ import annotations

from flask import Blueprint, jsonify

from .app_authz import require_session
from .payment_service import PaymentRequest, PaymentService
from .request_data import payload, text

bp = Blueprint("payments_api", __name__)

_payments = PaymentService()


@bp.post("/payment")
def record_payment():
    payer = require_session()
    req = PaymentRequest.from_payload(payload())
    _payments.record(payer, req)
    return jsonify({"message": "Payment saved successfully"}), 201


@bp.post("/checkMembership")
def check_membership():
    data = payload()
    premium = _payments.has_membership(text(data, "name"), text(data, "phone"))
    return jsonify({"premium": premium})


@bp.get("/api/payments")
def list_payments():
    return jsonify(_payments.list_all())

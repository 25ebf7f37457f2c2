from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, Request
from fastapi.responses import JSONResponse

from shiptrack.core.errors import ShipmentError, StoreError, ValidationError
from shiptrack.services.shipment_service import ShipmentService

router = APIRouter(prefix="/api/shipments", tags=["shipments"])
logger = logging.getLogger(__name__)


def _get_shipment_service(request: Request) -> ShipmentService:
    svc = getattr(getattr(request.app, "state", None), "shipment_service", None)
    if not svc:
        raise RuntimeError("ShipmentService not configured")
    return svc


def _error_response(err: ShipmentError, failure: str) -> JSONResponse:
    """Client errors keep their message; store failures get the generic one."""
    if isinstance(err, StoreError):
        logger.error("%s: %s", failure, err.message, exc_info=err)
        return JSONResponse({"error": failure}, status_code=err.status_code)
    return JSONResponse({"error": err.message}, status_code=err.status_code)


def _require_object(payload: Any) -> dict:
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValidationError("Missing required fields")
    return payload


@router.get("")
def list_shipments(request: Request):
    svc = _get_shipment_service(request)
    try:
        return svc.list_shipments()
    except ShipmentError as exc:
        return _error_response(exc, "Failed to read shipments")


@router.get("/track/{tracking_no}")
def track_shipment(tracking_no: str, request: Request):
    svc = _get_shipment_service(request)
    try:
        return svc.get_by_tracking_no(tracking_no)
    except ShipmentError as exc:
        return _error_response(exc, "Failed to find shipment")


@router.post("", status_code=201)
def create_shipment(request: Request, payload: Any = Body(None)):
    svc = _get_shipment_service(request)
    try:
        return svc.create(_require_object(payload))
    except ShipmentError as exc:
        return _error_response(exc, "Failed to create shipment")


@router.put("/{shipment_id}")
def update_shipment(shipment_id: str, request: Request, payload: Any = Body(None)):
    svc = _get_shipment_service(request)
    try:
        return svc.update(shipment_id, _require_object(payload))
    except ShipmentError as exc:
        return _error_response(exc, "Failed to update shipment")


@router.delete("/{shipment_id}")
def delete_shipment(shipment_id: str, request: Request):
    svc = _get_shipment_service(request)
    try:
        return svc.delete(shipment_id)
    except ShipmentError as exc:
        return _error_response(exc, "Failed to delete shipment")

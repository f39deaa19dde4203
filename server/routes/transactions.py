"""Ticket purchase records."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from fitlockr_app.logging_config import get_logger, log_event
from logic.validation import TransactionCreateRequest
from models.transaction import Transaction
from server.common import get_store
from storage.ticketing_store import TicketingStore

LOGGER = get_logger(__name__)
router = APIRouter()


@router.post("", status_code=201)
def create_transaction(request: TransactionCreateRequest, store: TicketingStore = Depends(get_store)) -> dict:
    transaction = Transaction.from_document(request.model_dump(exclude_none=True))
    store.transactions.create(transaction)
    log_event(LOGGER, logging.INFO, "transaction_recorded", transaction_id=transaction.id)
    return {"transaction": transaction.to_document()}


@router.get("")
def list_transactions(user_id: Optional[str] = None, store: TicketingStore = Depends(get_store)) -> dict:
    return {
        "transactions": [store.populate_transaction(transaction) for transaction in store.list_transactions(user_id)]
    }


@router.delete("/{transaction_id}")
def delete_transaction(transaction_id: str, store: TicketingStore = Depends(get_store)) -> dict:
    if store.transactions.delete(transaction_id) is None:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return {"message": "Transaction deleted"}


__all__ = ["router"]

"""API Dependencies — hand the lifespan-built collaborators to route handlers.

Invariants:
    - Ledger client, publisher and store live on app.state, built once in the lifespan
    - Routes receive them only through these dependencies (tests override them)
"""

from datetime import timedelta

from fastapi import Depends, Request

from hivemint.config import Settings, get_settings
from hivemint.core.repository_protocols import HiveStore, LedgerClient, MetadataPublisher
from hivemint.services.purchase_workflow import PurchaseWorkflow


def get_hive_store(request: Request) -> HiveStore:
    return request.app.state.hive_store


def get_ledger_client(request: Request) -> LedgerClient:
    return request.app.state.ledger_client


def get_metadata_publisher(request: Request) -> MetadataPublisher:
    return request.app.state.metadata_publisher


def get_purchase_workflow(
    store: HiveStore = Depends(get_hive_store),
    ledger: LedgerClient = Depends(get_ledger_client),
    publisher: MetadataPublisher = Depends(get_metadata_publisher),
    settings: Settings = Depends(get_settings),
) -> PurchaseWorkflow:
    return PurchaseWorkflow(
        store, ledger, publisher,
        reconcile_grace=timedelta(seconds=settings.reconcile_grace_seconds),
    )

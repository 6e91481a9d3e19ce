from flask import current_app

from ..ledger import SqlAlchemyStore


def get_store():
    """Entity store for the current request; overridable via LEDGER_STORE_FACTORY."""
    factory = current_app.config.get("LEDGER_STORE_FACTORY") or SqlAlchemyStore
    return factory()

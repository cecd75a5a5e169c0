"""
PerkHub — Search-and-Filter View Client
=========================================

The "All Perks" page as an asyncio view-model:

    - api.py         PerkApiClient, httpx wrapper around GET /perks/all
    - scheduling.py  cancellable debounce timer on top of the event loop
    - view.py        PerkSearchView, the page state and its transitions
    - render.py      text rendering of a PerkSearchView

Data flow:
    input → state update → debounce timer → HTTP GET → state update
    → derived merchant options → render
"""

from perkhub.client.api import PerkApiClient
from perkhub.client.view import PerkSearchView, build_query_params, derive_merchant_options

__all__ = [
    "PerkApiClient",
    "PerkSearchView",
    "build_query_params",
    "derive_merchant_options",
]

# Routes package init
"""
PerkHub — API Routes Package
==============================

Route Inventory:
    - perks.py:   GET  /api/perks/all       (public search and merchant filter)
                  GET  /api/perks           (caller's perks)
                  GET  /api/perks/{id}      (single perk)
                  POST /api/perks           (create)
                  PATCH/DELETE /api/perks/{id}
    - health.py:  GET  /health              (service health check)

Routes stay thin: they extract request data, call PerkService and pick the
status code. Business rules live in services/.
"""

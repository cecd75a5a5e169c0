# Services package init
"""
PerkHub — Services Layer
==========================

What:  Business logic between the routes (HTTP) and the database.
How:   Services take a session plus plain arguments, apply the perk rules
       and return Pydantic read models. Routes never build queries.

Service Inventory:
    - PerkService: public search/filter listing and creator-scoped CRUD
"""

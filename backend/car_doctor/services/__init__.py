# Services package init
"""
Car Doctor Backend — Services Layer
=====================================

What:  Business logic between routes (HTTP) and the document store.

Service Inventory:
    - TokenService:   issue / verify session tokens (PyJWT)
    - CatalogService: read-only service offerings
    - OrderService:   order create / list / confirm / delete

All services are stateless singletons; the store is passed in per call.
"""

# Routes package init
"""
Car Doctor Backend — API Routes Package
=========================================

Route Inventory:
    - root.py:     GET    /                      (plain-text banner)
                   GET    /health                (store connectivity)
    - session.py:  POST   /session               (issue session cookie)
                   GET    /session/logout        (clear session cookie)
    - catalog.py:  GET    /services              (all offerings)
                   GET    /services/{id}         (one offering or null)
    - orders.py:   GET    /orders?email=         (authenticated, own orders)
                   POST   /orders                (create)
                   PUT    /orders/status         (confirm)
                   DELETE /orders/{id}           (delete)
    - legacy.py:   original client paths mapped onto the handlers above,
                   mounted only when ENABLE_LEGACY_ROUTES is on

Routes stay thin: parse the request, call one service method, return.
"""

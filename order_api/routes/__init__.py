"""
Order API Routes Package
========================

Route Inventory:
    - customers.py:  GET    /users
    - orders.py:     GET    /orders
                     POST   /orders
                     GET    /orders/{id}
                     PATCH  /orders/{id}
                     PUT    /orders/{id}
                     DELETE /orders/{id}

Routes parse and validate the request, then delegate to a service.
"""

"""
Order API Services Layer
========================

Service Inventory:
    - CustomerService: bounded customer listing
    - OrderService: order CRUD, one statement per operation

Services receive the connection pool through their constructor and know
nothing about HTTP.
"""

# Services package init
"""
Books API - Services Layer
============================

What:  Orchestration between routes (HTTP) and repositories (persistence).

Service Inventory:
    - BookService: list/get/create/update/delete over a CrudRepository

Services receive their repository through the constructor, so they can be
unit-tested with a mock repository and no database.
"""

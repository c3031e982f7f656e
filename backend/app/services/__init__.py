# Services package init
"""
Notekeep Backend: Services Layer
==================================

What:  Business logic layer sitting between routes (HTTP) and database (persistence).
How:   Services take the request's session and the caller's UserContext,
       apply ownership and business rules, and return response schemas.

Service Inventory:
    - NoteService: list / fetch / create / partial update / delete notes
    - TagService:  list with counts / create / rename / delete tags
"""

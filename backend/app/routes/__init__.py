# Routes package init
"""
Notekeep Backend: API Routes Package
======================================

Route Inventory:
    - notes.py:   GET/POST       /api/notes
                  GET/PATCH/DEL  /api/notes/{id}
    - tags.py:    GET/POST       /api/tags
                  PATCH/DEL      /api/tags/{id}
    - health.py:  GET            /health

Routes stay thin: resolve the caller, call the service, pick the status
code. Ownership and validation rules live in the services.
"""

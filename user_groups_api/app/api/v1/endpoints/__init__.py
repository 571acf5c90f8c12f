"""
Endpoint subpackage for API v1.

Each module defines an ``APIRouter`` for one domain (users, groups);
``router.py`` one level up aggregates them.
"""

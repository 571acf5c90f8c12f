"""
Service layer.

Each service owns the SQL for one domain and reports failures with the
exceptions from ``core.errors``.
"""

"""
Study Notes Service.

- core/: Configuration, logging, database, security, storage, access control
- models/: SQLAlchemy models
- repositories/: Data access layer
- services/: Business rules (identity, notes, taxonomy, groups, attachments)
- schemas/: Pydantic request/response schemas
- api/: FastAPI routers
"""

__version__ = "1.0.0"

"""Infrastructure layer: persistence and external gateways.

- **database**: async SQLAlchemy engine, sessions and the generic repository
- **models**: ORM models for the tax administration schema
- **repositories**: entity specific queries
- **gateways**: SMS and payment gateway clients
"""

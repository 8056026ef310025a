"""Nagarkar - Municipal Property Tax Management Service.

Nagarkar lets a municipality bill citizens for property tax, collect
payments at the counter or through an online gateway, charge late payment
penalties and keep citizens informed by SMS.

Architecture Overview:
- **API Layer**: FastAPI routers, bearer authentication and middleware
- **Core Layer**: Configuration, logging, tracing, exceptions and security
- **Domain Layer**: Penalty rules, identifiers and status enumerations
- **Services Layer**: Use cases over one database session each
- **Infrastructure Layer**: Persistence, repositories and mock gateways
- **Tasks Layer**: Celery worker and beat schedule for the recurring jobs
"""

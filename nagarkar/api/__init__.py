"""HTTP API layer of the Nagarkar municipal tax service.

Key components:
- **main**: Application factory and lifecycle management
- **routers**: Endpoints for admins, citizens, payments and scheduled jobs
- **dependencies**: Bearer token authentication and gateway injection
- **middleware**: Security headers, correlation IDs, request logging and
  centralized error handling
- **schemas**: Pydantic request and response models
- **utils**: orjson based response class
"""

"""Pydantic request and response schemas of the API.

Response schemas read ORM rows and service results through
``from_attributes``; every success payload is wrapped in ``SuccessResponse``.
"""

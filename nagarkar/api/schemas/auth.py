"""Login and token verification payloads."""

from typing import Literal

from pydantic import Field

from nagarkar.api.schemas.citizens import CitizenOut
from nagarkar.api.schemas.common import ORMSchema, RequestSchema


class AdminLoginRequest(RequestSchema):
    username: str = Field(min_length=1, max_length=100)
    password: str = Field(min_length=1)


class CitizenLoginRequest(RequestSchema):
    customer_id: str = Field(min_length=1, max_length=20, examples=["CID123456"])


class TokenVerifyRequest(RequestSchema):
    token: str = Field(min_length=1)


class AdminOut(ORMSchema):
    id: int
    username: str


class AdminLoginOut(ORMSchema):
    token: str
    admin: AdminOut


class CitizenLoginOut(ORMSchema):
    token: str
    citizen: CitizenOut


class VerifiedAdmin(ORMSchema):
    type: Literal["admin"] = "admin"
    user: AdminOut


class VerifiedCitizen(ORMSchema):
    type: Literal["citizen"] = "citizen"
    user: CitizenOut

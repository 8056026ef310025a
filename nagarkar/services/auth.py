"""Login and token verification for admins and citizens."""

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from nagarkar.core.exceptions import NotFoundError, UnauthorizedError
from nagarkar.core.security import (
    Principal,
    create_access_token,
    decode_access_token,
    verify_password,
)
from nagarkar.infrastructure.database.models import Admin, Citizen
from nagarkar.infrastructure.repositories import AdminRepository, CitizenRepository


class AuthService:
    def __init__(self, session: AsyncSession) -> None:
        self.admins = AdminRepository(session)
        self.citizens = CitizenRepository(session)

    async def login_admin(self, username: str, password: str) -> tuple[str, Admin]:
        """Check admin credentials and issue a token.

        Raises:
            UnauthorizedError: If the username is unknown or the password
                does not match. Both cases share one message.
        """
        admin = await self.admins.get_by_username(username)
        if admin is None or not verify_password(password, admin.password_hash):
            logger.warning("Failed admin login", username=username)
            raise UnauthorizedError("Invalid credentials")

        token = create_access_token(
            Principal(role="admin", id=admin.id, username=admin.username)
        )
        logger.info("Admin logged in", principal=f"admin:{admin.id}")
        return token, admin

    async def login_citizen(self, customer_id: str) -> tuple[str, Citizen]:
        """Issue a token for the citizen with ``customer_id``."""
        citizen = await self.citizens.get_by_customer_id(customer_id)
        if citizen is None:
            logger.warning("Failed citizen login", customer_id=customer_id)
            raise UnauthorizedError("Invalid Customer ID")

        token = create_access_token(
            Principal(role="citizen", id=citizen.id, customer_id=citizen.customer_id)
        )
        logger.info("Citizen logged in", principal=f"citizen:{citizen.id}")
        return token, citizen

    async def verify_token(self, token: str) -> Admin | Citizen:
        """Resolve a token to the account it was issued for.

        Raises:
            UnauthorizedError: If the token is invalid or expired.
            NotFoundError: If the account no longer exists.
        """
        principal = decode_access_token(token)
        if principal.is_admin:
            admin = await self.admins.get_by_id(principal.id)
            if admin is None:
                raise NotFoundError("Admin not found")
            return admin

        citizen = await self.citizens.get_by_id(principal.id)
        if citizen is None:
            raise NotFoundError("Citizen not found")
        return citizen

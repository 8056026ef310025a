"""Application services.

Each service wraps one area of tax administration. Services take an
``AsyncSession`` and the collaborators they need, query through the
repositories, raise ``NagarkarError`` subclasses for every failure the API
reports, and return ORM objects or small result dataclasses. They never
commit; the session owner decides.
"""

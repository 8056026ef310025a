"""Type aliases shared across layers."""

from typing import Literal, TypeAlias

# Authenticated principal kinds, as carried in access tokens
Role: TypeAlias = Literal["admin", "citizen"]

"""
Contract Base Model
===================

Common pydantic configuration for all shared records: snake_case
attributes in Python, camelCase keys on the wire.

Author: cpdtrack Team
Version: 1.0.0
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ContractModel(BaseModel):
    """Base for records exchanged between the core and its callers."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_wire(self) -> dict:
        """Serialize with camelCase keys and JSON-compatible values."""
        return self.model_dump(mode="json", by_alias=True)

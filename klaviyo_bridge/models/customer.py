"""
Customer domain fact.

Identity of a shop customer, keyed by email, and its Klaviyo profile form.

Dependencies: pydantic
System role: Profile identification payloads
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

_PROFILE_FIELDS = (
    "email",
    "first_name",
    "last_name",
    "phone_number",
    "title",
    "organization",
)


class Customer(BaseModel):
    """Customer identity. Email is the merge key for every profile operation."""

    model_config = ConfigDict(frozen=True)

    email: str = Field(min_length=1, description="Canonical profile merge key")
    first_name: str | None = None
    last_name: str | None = None
    phone_number: str | None = None
    title: str | None = None
    organization: str | None = None
    properties: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Customer":
        """Build a customer from a validated request payload."""
        return cls.model_validate(
            {**data, "properties": data.get("properties") or {}}
        )

    def to_profile_attributes(self) -> dict[str, Any]:
        """
        Render the profile attributes sent to Klaviyo.

        Named fields with a value come first; custom properties are merged on
        top and win on key collision.

        Returns:
            dict: Profile attributes
        """
        attributes = {
            name: getattr(self, name)
            for name in _PROFILE_FIELDS
            if getattr(self, name) is not None
        }
        attributes.update(self.properties)
        return attributes

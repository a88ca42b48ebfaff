"""User-related Pydantic schemas."""

from typing import Annotated

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

NameField = Annotated[
    str | None, Field(validation_alias=AliasChoices("Name", "name"))
]
BirthdayField = Annotated[
    str | None, Field(validation_alias=AliasChoices("Birthday", "birthday"))
]


class UserCreate(BaseModel):
    """Schema for creating a user.

    Both fields are checked for emptiness by the endpoint, so a missing
    field and an empty string are reported the same way.
    """

    name: NameField = None
    birthday: BirthdayField = None


class UserUpdate(BaseModel):
    """Schema for a partial user update.

    Absent, null and empty fields leave the stored value unchanged.
    """

    name: NameField = None
    birthday: BirthdayField = None

    def changes(self) -> dict[str, str]:
        """Fields that should overwrite the stored record."""
        return {
            field: value
            for field, value in (("name", self.name), ("birthday", self.birthday))
            if value
        }


class UserResponse(BaseModel):
    """Schema for user response."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(
        validation_alias=AliasChoices("ID", "id"), serialization_alias="ID"
    )
    name: str = Field(
        validation_alias=AliasChoices("Name", "name"), serialization_alias="Name"
    )
    birthday: str = Field(
        validation_alias=AliasChoices("Birthday", "birthday"),
        serialization_alias="Birthday",
    )

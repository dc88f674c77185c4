"""Database capabilities model."""

from pydantic import BaseModel, Field


class DatabaseCapabilities(BaseModel):
    """Flags indicating what features a database supports."""

    foreign_keys: bool = Field(
        default=False,
        description="Database reports foreign key constraints",
    )
    enum_types: bool = Field(
        default=False,
        description="Database has a closed enumeration column type",
    )

    def get_supported_features(self) -> list[str]:
        """Get list of supported feature names."""
        return [name for name, value in self.model_dump().items() if value is True]

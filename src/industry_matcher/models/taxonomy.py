from typing import List
from pydantic import BaseModel, ConfigDict, Field, field_validator

class TaxonomyEntry(BaseModel):
    """
    One industry classification from the fixed taxonomy. Read-only after load.
    """
    model_config = ConfigDict(frozen=True)

    code: str = Field(..., description="Stable industry code used as the downstream search filter")
    name: str = Field(..., description="Short industry label")
    description: str = Field("", description="What businesses in this industry do")
    keywords: List[str] = Field(default_factory=list, description="Short search terms for the industry")

    @field_validator("code", "name", mode="before")
    @classmethod
    def _not_blank(cls, value) -> str:
        value = "" if value is None else str(value).strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @field_validator("description", mode="before")
    @classmethod
    def _description_default(cls, value):
        return "" if value is None else str(value)

    @field_validator("keywords", mode="before")
    @classmethod
    def _keywords_default(cls, value):
        if value is None:
            return []
        return [str(k) for k in value if str(k).strip()]

    @property
    def searchable_text(self) -> str:
        """Name, description and keywords joined into one string."""
        return " ".join([self.name, self.description, *self.keywords])

from pydantic import BaseModel, Field, field_validator


class CatalogItemCreate(BaseModel):
    name: str = Field(min_length=1)

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name cannot be blank")
        return value


class CatalogItem(BaseModel):
    id: int
    name: str

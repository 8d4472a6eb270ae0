from pydantic import BaseModel, ConfigDict, Field, field_validator

# ✅ Schéma pour Category
class CategoryCreate(BaseModel):
    name: str = Field(..., max_length=100)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Category name is required")
        return value

class CategoryResponse(BaseModel):
    id: int
    name: str
    product_count: int = Field(default=0, description="Nombre de produits associés")

    model_config = ConfigDict(from_attributes=True)

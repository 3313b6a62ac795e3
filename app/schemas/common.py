from pydantic import BaseModel, ConfigDict, Field


class Pagination(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    page: int = Field(description="Current page number (1-based)", examples=[1])
    limit: int = Field(description="Items per page", examples=[10])
    total: int = Field(description="Total number of matching records", examples=[42])
    total_pages: int = Field(
        alias="totalPages", description="Total number of pages", examples=[5]
    )
    has_next: bool = Field(alias="hasNext", description="A later page exists")
    has_prev: bool = Field(alias="hasPrev", description="An earlier page exists")


class ErrorResponse(BaseModel):
    error: str = Field(description="Error message", examples=["Failed to fetch opportunities"])

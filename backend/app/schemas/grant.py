"""
Grant Schemas Module
====================

Pydantic models for ad-hoc privilege grants.
"""

from pydantic import BaseModel, ConfigDict, Field


class GrantRequest(BaseModel):
    """Schema for granting privileges on one database."""

    username: str = Field(
        ...,
        min_length=1,
        description="MySQL account name"
    )
    privilege: str = Field(
        ...,
        min_length=1,
        description="Comma-separated privilege list, e.g. 'SELECT, INSERT'"
    )
    dbname: str = Field(
        ...,
        min_length=1,
        description="Target database, or * for all databases"
    )
    host: str = Field(
        default="localhost",
        min_length=1,
        description="Account host"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "username": "bob",
                "privilege": "SELECT, SHOW VIEW",
                "dbname": "shop",
                "host": "localhost"
            }
        }
    )

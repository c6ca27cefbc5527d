"""
Common/shared schemas used across the application.
"""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for app-facing payloads: camelCase on the wire, snake_case in Python."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MessageResponse(CamelModel):
    """Plain acknowledgement"""
    success: bool = True
    message: str


class HealthResponse(BaseModel):
    """Health check response"""
    status: str
    supabase: str
    firebase: str

from pydantic import BaseModel
from typing import Optional


class QueryRequest(BaseModel):
    """
    Model representing a query request from the client.
    Fields are optional so that missing values produce a 400 instead of a validation error.
    """
    query: Optional[str] = None
    session_id: Optional[str] = None
    response_length: Optional[str] = None

from pydantic import BaseModel


class Prompt(BaseModel):
    """
    System and user instructions for one generation call, with the token ceiling
    that matches the requested response length.
    """
    system: str
    user: str
    max_tokens: int

from typing import Optional
from fastapi import Header, HTTPException
from app.core.settings import get_settings


def verify_api_key(api_key: Optional[str]) -> bool:
    """
    Verify if the API key is valid
    """
    return api_key is not None and api_key == get_settings().api_key


async def require_api_key(x_api_key: Optional[str] = Header(None)):
    """
    Dependency guarding operator endpoints
    """
    if not verify_api_key(x_api_key):
        raise HTTPException(status_code=401, detail="Invalid API key")

"""
Request dependencies shared by the routers.

Identity is resolved from the bearer token only; whether the caller may act
on a given offer or transaction is decided by the services.
"""
import os

from fastapi import Depends, HTTPException, Request
from jose import JWTError, jwt
from dotenv import load_dotenv

load_dotenv()
SECRET_KEY = os.getenv("JWT_SECRET")
ALGORITHM = "HS256"


# Token Auth Dependency
def verify_token(request: Request) -> dict:
    auth = request.headers.get("Authorization")
    if not auth or not auth.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Missing token")
    if not SECRET_KEY:
        raise HTTPException(status_code=500, detail="JWT secret not configured")
    token = auth.split(" ")[1]
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        return payload
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid token")


def get_current_user_id(token: dict = Depends(verify_token)) -> int:
    user_id = token.get("id", token.get("userId"))
    if user_id is None:
        raise HTTPException(status_code=401, detail="Unauthorized")
    try:
        return int(user_id)
    except (TypeError, ValueError):
        raise HTTPException(status_code=401, detail="Unauthorized")

from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from tasker.core.config import settings

def create_access_token(user_id: str, expire_minutes: int = 15) -> str:
    payload = {
        "user_id": user_id,
        "exp": datetime.now(timezone.utc) + timedelta(minutes=expire_minutes),
        "type": "access"
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)

def verify_token(token: str) -> Optional[dict]:
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        return None

def decode_token(token: str) -> Optional[str]:
    # renvoie l'owner id (opaque) porté par le token
    payload = verify_token(token)
    if payload is None:
        return None
    return payload.get("user_id")

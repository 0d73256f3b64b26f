from fastapi import Header, HTTPException, status
from typing import Optional
from tasker.core.security import decode_token


def get_current_user_id(authorization: Optional[str] = Header(None)) -> str:
    """
    Récupère l'owner id depuis le JWT token.

    L'identité est opaque: aucune table users, le claim user_id suffit
    à scoper toutes les opérations.
    """
    if not authorization:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing token")

    token = authorization.replace("Bearer ", "")
    user_id = decode_token(token)
    if not user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    return user_id

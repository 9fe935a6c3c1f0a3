from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from app.database import get_db
from app.models.user import User
from app.schemas.user import TokenData
from app.utils.jwt_handler import decode_access_token


# Token issuance lives outside this service; auto_error is off so a missing
# token reaches the operations as "no identity" instead of a framework 401.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)


def _resolve_user(db: Session, token: str) -> User:
    payload = decode_access_token(token)
    user_id = payload.get("sub")
    if user_id is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token payload")
    try:
        token_data = TokenData(user_id=int(user_id))
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token subject") from exc
    user = db.query(User).filter(User.id == token_data.user_id).first()
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")
    return user


def get_optional_user(db: Session = Depends(get_db), token: str | None = Depends(oauth2_scheme)) -> User | None:
    if not token:
        return None
    return _resolve_user(db, token)


def get_current_user_id(current_user: User | None = Depends(get_optional_user)) -> int | None:
    return current_user.id if current_user is not None else None

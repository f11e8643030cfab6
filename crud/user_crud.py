from sqlalchemy.orm import Session
from models.user import User, UserSession
from schemas.user_schema import UserCreate, SessionCreate


def get_user(db: Session, user_id: str):
    return db.query(User).filter(User.id == user_id).first()


def create_user(db: Session, payload: UserCreate):
    user = User(**payload.model_dump())
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def get_session_by_token(db: Session, token: str):
    return db.query(UserSession).filter(UserSession.token == token).first()


def create_session(db: Session, payload: SessionCreate):
    s = UserSession(
        user_id=payload.user_id,
        token=payload.token,
        expires_at=payload.expires_at,
        ip_address=payload.ip_address,
        user_agent=payload.user_agent,
    )
    db.add(s)
    db.commit()
    db.refresh(s)
    return s

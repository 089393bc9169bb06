# api/users/queries.py
from sqlalchemy import select, func

from db_models.user import User


def select_user_by_id(user_id: int):
    return select(User).where(User.id == user_id)


def select_user_by_email(email: str, exclude_id: int | None = None):
    stmt = select(User).where(User.email == email)
    if exclude_id is not None:
        stmt = stmt.where(User.id != exclude_id)
    return stmt


def count_users():
    return select(func.count(User.id))


def select_users(skip: int = 0, limit: int = 100):
    return select(User).order_by(User.created_at.desc(), User.id.desc()).offset(skip).limit(limit)

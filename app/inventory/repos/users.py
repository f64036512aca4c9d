from sqlalchemy import select

from app.inventory.db.models import User


class UserRepository:
    def __init__(self, db):
        self.db = db

    def get_by_username(self, username: str):
        stmt = select(User).where(User.username == username)
        return self.db.execute(stmt).scalars().first()

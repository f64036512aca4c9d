from app.inventory.core.error_catalog import AppError, ErrorCatalog
from app.inventory.core.security import IssuedToken, issue_access_token, verify_password
from app.inventory.repos.users import UserRepository


class AuthService:
    def __init__(self, db):
        self.repo = UserRepository(db)

    def login(self, username: str, password: str):
        user = self.repo.get_by_username(username)
        if user is None or not verify_password(password, user.hashed_password):
            raise AppError(ErrorCatalog.INVALID_CREDENTIALS)
        issued: IssuedToken = issue_access_token(user)
        return user, issued

    def find_user(self, username: str):
        return self.repo.get_by_username(username)

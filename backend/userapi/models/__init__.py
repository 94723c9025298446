from userapi.models.user import Gender, User

__all__ = [
    "Gender",
    "User",
]

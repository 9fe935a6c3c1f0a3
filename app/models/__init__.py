from app.models.profession import Profession
from app.models.user import User

__all__ = [
	"Profession",
	"User",
]

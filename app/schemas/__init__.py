from app.schemas.profession import (
	ErrorResponse,
	ProfessionFields,
	ProfessionListResponse,
	ProfessionRead,
	ProfessionRecord,
	ProfessionResponse,
	ProfessionUpdateResponse,
)
from app.schemas.user import TokenData

__all__ = [
	"ErrorResponse",
	"ProfessionFields",
	"ProfessionListResponse",
	"ProfessionRead",
	"ProfessionRecord",
	"ProfessionResponse",
	"ProfessionUpdateResponse",
	"TokenData",
]

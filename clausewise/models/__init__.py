from clausewise.models.base import Base
from clausewise.models.contract import Contract, ContractStatus, ContractType
from clausewise.models.feedback import ReportFeedback
from clausewise.models.profile import AppRole, Profile, UserRole
from clausewise.models.review_report import ReviewReport
from clausewise.models.suggestion_response import SuggestionResponse

__all__ = [
    "Base",
    "Contract",
    "ContractStatus",
    "ContractType",
    "ReviewReport",
    "SuggestionResponse",
    "ReportFeedback",
    "Profile",
    "UserRole",
    "AppRole",
]

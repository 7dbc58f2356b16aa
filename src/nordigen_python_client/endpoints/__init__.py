from .requisitions import RequisitionsEndpoint
from .institutions import InstitutionsEndpoint
from .agreements import AgreementsEndpoint
from .accounts import AccountsEndpoint
from .token import TokenEndpoint

__all__ = [
    "AccountsEndpoint",
    "AgreementsEndpoint",
    "InstitutionsEndpoint",
    "RequisitionsEndpoint",
    "TokenEndpoint",
]

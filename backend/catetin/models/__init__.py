from catetin.models.auth_provider import AuthProviderModel
from catetin.models.money_flow import MoneyFlowModel
from catetin.models.user import UserModel
from catetin.models.user_auth import UserAuthModel

__all__ = [
    "AuthProviderModel",
    "MoneyFlowModel",
    "UserAuthModel",
    "UserModel",
]

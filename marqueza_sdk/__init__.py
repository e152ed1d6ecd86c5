from .client import StoreClient
from .auth import AuthSession
from .products import ProductsManager
from .profile import EditProfileForm, UserProfile

__all__ = ["StoreClient", "AuthSession", "ProductsManager", "EditProfileForm", "UserProfile"]

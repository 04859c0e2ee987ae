from .auth_controller import AuthController
from .locations_controller import LocationsController
from .misc_controller import MiscController
from .users_controller import UsersController

__all__ = ["AuthController", "LocationsController", "MiscController", "UsersController"]

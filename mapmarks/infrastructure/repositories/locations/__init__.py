from .sqlalchemy_location_repository import SqlAlchemyLocationRepository

__all__ = ["SqlAlchemyLocationRepository"]

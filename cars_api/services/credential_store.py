"""Lookups and writes for users and cars.

The store only flushes; committing is left to the calling service so that a
whole operation lands in one transaction.
"""

from sqlalchemy.orm import Session

from cars_api.models.car import Car
from cars_api.models.enums import UserStatus
from cars_api.models.user import User


class CredentialStore:
    """Point reads and writes over a database session."""

    def __init__(self, db: Session):
        self.db = db

    # --- Users ---

    def find_user_by_login(self, login: str) -> User | None:
        return self.db.query(User).filter(User.login == login).first()

    def find_user_by_email(self, email: str) -> User | None:
        return self.db.query(User).filter(User.email == email).first()

    def find_user_by_id(self, user_id: int) -> User | None:
        return self.db.get(User, user_id)

    def find_user_by_id_and_status(self, user_id: int, status: UserStatus) -> User | None:
        return self.db.query(User).filter(User.id == user_id, User.status == status).first()

    def find_users_by_status(self, status: UserStatus) -> list[User]:
        return self.db.query(User).filter(User.status == status).order_by(User.id).all()

    def save_user(self, user: User) -> User:
        self.db.add(user)
        self.db.flush()
        return user

    # --- Cars ---

    def find_car_by_license_plate(self, license_plate: str) -> Car | None:
        return self.db.query(Car).filter(Car.license_plate == license_plate).first()

    def find_car_by_id(self, car_id: int) -> Car | None:
        return self.db.get(Car, car_id)

    def find_car_by_id_and_owner_login(self, car_id: int, login: str) -> Car | None:
        return (
            self.db.query(Car)
            .join(User, Car.owner_id == User.id)
            .filter(Car.id == car_id, User.login == login)
            .first()
        )

    def find_cars_by_owner_login(self, login: str) -> list[Car]:
        return (
            self.db.query(Car)
            .join(User, Car.owner_id == User.id)
            .filter(User.login == login)
            .order_by(Car.id)
            .all()
        )

    def save_car(self, car: Car) -> Car:
        self.db.add(car)
        self.db.flush()
        return car

    def delete_car(self, car: Car) -> None:
        self.db.delete(car)
        self.db.flush()

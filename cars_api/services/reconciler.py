"""Reconciliation of a user's owned cars against an incoming car list.

Incoming entries are matched to cars by license plate. For an update, each
entry is one of:

* a car the user already owns: its details are updated in place;
* a car registered to another owner: the whole update is rejected;
* an unknown plate: a new car is created for the user.

A stored car with no owner is not the user's car either, so naming its plate
also rejects the update.

Every entry is classified before anything changes, so a rejected entry leaves
the user's cars exactly as they were.
"""

import logging
from collections.abc import Sequence
from typing import Any

from cars_api.exceptions import LicensePlateConflictError, MissingFieldsError
from cars_api.models.car import Car
from cars_api.models.user import User
from cars_api.services.credential_store import CredentialStore
from cars_api.services.validation import is_blank

logger = logging.getLogger(__name__)

CAR_DETAIL_FIELDS = ("year", "model", "color")


def apply_car_details(car: Car, entry: Any) -> None:
    """Copy the year, model and color an entry provides onto a car."""
    for field in CAR_DETAIL_FIELDS:
        value = getattr(entry, field, None)
        if value is not None:
            setattr(car, field, value)


def build_car(entry: Any) -> Car:
    """Build a new, unsaved car from an entry."""
    car = Car(license_plate=entry.license_plate, usage_amount=0)
    apply_car_details(car, entry)
    return car


class CarReconciler:
    """Merges car entries into a user's owned cars."""

    def __init__(self, store: CredentialStore):
        self.store = store

    def reconcile(self, user: User, entries: Sequence[Any]) -> list[Car]:
        """Replace the user's owned cars with the cars named by ``entries``.

        Owned cars missing from ``entries`` are detached from the user but
        stay in storage. Returns the new owned list, in entry order.

        Raises:
            MissingFieldsError: if an entry has a blank license plate.
            LicensePlateConflictError: if a plate belongs to another user.
        """
        plan = self._classify(user, entries)

        owned: list[Car] = []
        created: dict[str, Car] = {}
        for entry, car in plan:
            if car is None:
                car = created.get(entry.license_plate)
                if car is None:
                    car = build_car(entry)
                    created[entry.license_plate] = car
                else:
                    apply_car_details(car, entry)
            else:
                apply_car_details(car, entry)
            if not any(existing is car for existing in owned):
                owned.append(car)

        user.cars = owned
        for car in created.values():
            self.store.save_car(car)

        logger.info(
            f"Reconciled cars for user {user.id}: {len(owned)} owned, {len(created)} created"
        )
        return owned

    def _classify(self, user: User, entries: Sequence[Any]) -> list[tuple[Any, Car | None]]:
        """Pair each entry with its existing car, or None for a new car.

        Nothing is modified here.
        """
        owned_by_plate = {car.license_plate: car for car in user.cars}
        new_plates: set[str] = set()
        plan: list[tuple[Any, Car | None]] = []

        for entry in entries:
            plate = entry.license_plate
            if is_blank(plate):
                raise MissingFieldsError()

            car = owned_by_plate.get(plate)
            if car is None and plate not in new_plates:
                stored = self.store.find_car_by_license_plate(plate)
                if stored is None:
                    new_plates.add(plate)
                elif stored.owner_id != user.id:
                    # Detached cars count as foreign: only registration may re-own them
                    logger.info(f"License plate {plate} is not owned by user {user.id}")
                    raise LicensePlateConflictError(plate)
                else:
                    car = stored
            plan.append((entry, car))

        return plan

    def assign_on_create(self, user: User, entries: Sequence[Any]) -> list[Car]:
        """Attach cars to a user being registered.

        A plate that is already stored reuses that car, which moves to the new
        user; other plates become new cars. Owners are not checked here.
        """
        cars: list[Car] = []
        by_plate: dict[str, Car] = {}
        for entry in entries:
            plate = entry.license_plate
            if is_blank(plate):
                raise MissingFieldsError()
            if plate in by_plate:
                continue

            car = self.store.find_car_by_license_plate(plate)
            if car is None:
                car = build_car(entry)
            by_plate[plate] = car
            cars.append(car)

        user.cars = cars
        return cars

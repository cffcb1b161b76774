"""
Regional vehicle factory.

Each region has one pure construction function; ``build_car`` picks it
from REGION_FACTORIES by the Region tag. Adding a region means adding a
function and a table entry, not a factory subclass.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict

from ..errors import UnknownVariantError


class Region(Enum):
    EUROPE = "europe"
    USA = "usa"
    JAPAN = "japan"


class CarType(Enum):
    SEDAN = "sedan"
    COUPE = "coupe"
    SUV = "suv"


@dataclass(frozen=True)
class Car:
    car_type: CarType
    model: str
    region: Region

    def __str__(self) -> str:
        return f"{self.car_type.value} {self.model} ({self.region.value})"


def _europe(car_type: CarType) -> Car:
    return Car(car_type, "BMW", Region.EUROPE)


def _usa(car_type: CarType) -> Car:
    return Car(car_type, "BMW", Region.USA)


def _japan(car_type: CarType) -> Car:
    return Car(car_type, "BMW", Region.JAPAN)


CarFactory = Callable[[CarType], Car]

REGION_FACTORIES: Dict[Region, CarFactory] = {
    Region.EUROPE: _europe,
    Region.USA: _usa,
    Region.JAPAN: _japan,
}


def build_car(region: Region, car_type: CarType) -> Car:
    """
    Build a car of ``car_type`` for ``region``.

    Raises:
        UnknownVariantError: if the region or car type is not a known tag.
    """
    if not isinstance(car_type, CarType):
        raise UnknownVariantError("car type", car_type)
    try:
        factory = REGION_FACTORIES[region]
    except (KeyError, TypeError):
        raise UnknownVariantError("region factory", region) from None
    return factory(car_type)

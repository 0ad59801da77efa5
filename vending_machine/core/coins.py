"""
Проверка подлинности монет по физическим характеристикам (симуляция, без железа).
Номинал, не прошедший проверку, не используется при выдаче сдачи.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Mapping, Tuple

MATERIAL_BIMETAL = 1
MATERIAL_CUPRONICKEL = 2
MATERIAL_COPPER = 3

# Допуски монетоприёмника
WEIGHT_RANGE = (3.0, 12.0)
DIAMETER_RANGE = (15.0, 30.0)


@dataclass(frozen=True)
class CoinSpec:
    denomination: int
    weight: float     # граммы
    diameter: float   # мм
    material: int


def build_coin_specs(profiles: Mapping[int, Tuple[float, float, int]]) -> Dict[int, CoinSpec]:
    return {
        d: CoinSpec(denomination=d, weight=w, diameter=dia, material=m)
        for d, (w, dia, m) in profiles.items()
    }


def _within(value: float, bounds: Tuple[float, float]) -> bool:
    return bounds[0] < value < bounds[1]


def verify_coin_authenticity(denomination: int, specs: Mapping[int, CoinSpec]) -> bool:
    """
    Проверка в четыре шага: известный номинал, допуск по весу/диаметру,
    проводимость по материалу, контрольная сумма.
    """
    spec = specs.get(denomination)
    if spec is None:
        return False
    if not _within(spec.weight, WEIGHT_RANGE) or not _within(spec.diameter, DIAMETER_RANGE):
        return False
    if spec.material == MATERIAL_BIMETAL and spec.weight < 9.0:
        return False
    if spec.material == MATERIAL_CUPRONICKEL and spec.diameter < 21.0:
        return False
    if spec.material == MATERIAL_COPPER and spec.weight > 5.0:
        return False
    checksum = denomination * 17 + spec.material
    if checksum % 2 == 0:
        return True
    return checksum > 10

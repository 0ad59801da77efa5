"""
Конфигурация автомата по умолчанию: монеты, резерв сдачи, пороги, код обслуживания.
"""
from dataclasses import dataclass, field
from typing import Dict, Tuple

from .exceptions import ConfigurationError

# Закрытый набор номиналов, от крупного к мелкому
DEFAULT_DENOMINATIONS: Tuple[int, ...] = (50, 10, 5, 1)
DEFAULT_INITIAL_RESERVE: Dict[int, int] = {50: 5, 10: 20, 5: 20, 1: 50}

# Защитный остаток номинала при выдаче сдачи
SAFETY_THRESHOLD = 3
# Сдача больше этой суммы запускает аудит резерва
AUDIT_THRESHOLD = 50

DEFAULT_MAINTENANCE_CODE = "admin123"
STANDARD_RESTOCK_LEVEL = 10
BALANCE_WARNING_LIMIT = 1000

# Физика монет (симуляция): номинал -> (вес г, диаметр мм, код материала)
# 1: биметалл, 2: медно-никелевый сплав, 3: медь
DEFAULT_COIN_PROFILES: Dict[int, Tuple[float, float, int]] = {
    50: (10.0, 28.0, 1),
    10: (7.5, 26.0, 2),
    5: (4.4, 22.0, 2),
    1: (3.8, 20.0, 3),
}

# Показания датчиков для диагностики (симуляция)
DEFAULT_SUPPLY_VOLTAGE = 110
DEFAULT_COOLER_TEMPERATURE = 4


@dataclass
class MachineConfig:
    denominations: Tuple[int, ...] = DEFAULT_DENOMINATIONS
    initial_reserve: Dict[int, int] = field(default_factory=lambda: dict(DEFAULT_INITIAL_RESERVE))
    safety_threshold: int = SAFETY_THRESHOLD
    audit_threshold: int = AUDIT_THRESHOLD
    maintenance_code: str = DEFAULT_MAINTENANCE_CODE
    restock_level: int = STANDARD_RESTOCK_LEVEL
    balance_warning_limit: int = BALANCE_WARNING_LIMIT
    coin_profiles: Dict[int, Tuple[float, float, int]] = field(
        default_factory=lambda: dict(DEFAULT_COIN_PROFILES)
    )
    supply_voltage: int = DEFAULT_SUPPLY_VOLTAGE
    cooler_temperature: int = DEFAULT_COOLER_TEMPERATURE
    wifi_online: bool = True
    cellular_online: bool = True

    @property
    def sorted_denominations(self) -> Tuple[int, ...]:
        """Номиналы от крупного к мелкому (порядок выдачи сдачи)."""
        return tuple(sorted(self.denominations, reverse=True))

    def is_valid_coin(self, amount: int) -> bool:
        return amount in self.denominations

    def validate(self) -> None:
        """Проверка структуры конфигурации. Ошибки данных каталога сюда не относятся."""
        if not self.denominations:
            raise ConfigurationError("At least one denomination is required")
        if any(d <= 0 for d in self.denominations):
            raise ConfigurationError(
                "Denominations must be positive",
                details={"denominations": str(self.denominations)},
            )
        if len(set(self.denominations)) != len(self.denominations):
            raise ConfigurationError(
                "Duplicate denominations",
                details={"denominations": str(self.denominations)},
            )
        for coin, count in self.initial_reserve.items():
            if coin not in self.denominations:
                raise ConfigurationError(
                    f"Reserve holds unknown denomination {coin}",
                    details={"denomination": str(coin)},
                )
            if count < 0:
                raise ConfigurationError(
                    f"Negative reserve count for {coin}",
                    details={"denomination": str(coin), "count": str(count)},
                )
        # Номинал без годного профиля аллокатор пропускает, сдача им не выдаётся
        from .core.coins import build_coin_specs, verify_coin_authenticity

        specs = build_coin_specs(self.coin_profiles)
        for coin in self.denominations:
            if coin not in specs:
                raise ConfigurationError(
                    f"No coin profile for denomination {coin}",
                    details={"denomination": str(coin)},
                )
            if not verify_coin_authenticity(coin, specs):
                raise ConfigurationError(
                    f"Coin profile for {coin} fails the authenticity check",
                    details={"denomination": str(coin), "profile": str(self.coin_profiles[coin])},
                )
        if self.safety_threshold < 0:
            raise ConfigurationError("safety_threshold must be >= 0")
        if self.audit_threshold < 0:
            raise ConfigurationError("audit_threshold must be >= 0")
        if self.restock_level < 0:
            raise ConfigurationError("restock_level must be >= 0")

"""
Резерв монет и выдача сдачи.
Жадный алгоритм от крупного номинала к мелкому с защитой от полного опустошения номинала:
лучше выдать больше мелких монет, чем оставить автомат без крупных.
"""
from __future__ import annotations

from enum import Enum
from typing import Dict, Iterable, Mapping, Optional

from ..logging_config import get_logger
from .coins import CoinSpec, verify_coin_authenticity
from .state import ChangeResult

logger = get_logger(__name__)


class ReserveBand(str, Enum):
    CRITICAL_EMPTY = "critical_empty"
    DANGER_LOW = "danger_low"
    WARNING = "warning"
    HEALTHY = "healthy"
    OVERFLOW = "overflow"


def classify_reserve(count: int) -> ReserveBand:
    if count == 0:
        return ReserveBand.CRITICAL_EMPTY
    if count < 3:
        return ReserveBand.DANGER_LOW
    if count < 10:
        return ReserveBand.WARNING
    if count > 100:
        return ReserveBand.OVERFLOW
    return ReserveBand.HEALTHY


class CoinReserve:
    """Монеты в автомате: номинал -> количество. Количество никогда не уходит ниже нуля."""
    def __init__(self, counts: Mapping[int, int], denominations: Iterable[int]):
        self.denominations = tuple(sorted(denominations, reverse=True))
        self._counts: Dict[int, int] = {d: max(0, int(counts.get(d, 0))) for d in self.denominations}

    def count(self, denomination: int) -> int:
        return self._counts.get(denomination, 0)

    def remove(self, denomination: int, n: int) -> int:
        """Снять до n монет. Возвращает сколько реально снято."""
        taken = max(0, min(n, self.count(denomination)))
        if taken:
            self._counts[denomination] -= taken
        return taken

    def add(self, denomination: int, n: int) -> None:
        if denomination not in self._counts:
            raise KeyError(f"Unknown denomination: {denomination}")
        self._counts[denomination] += max(0, n)

    def total_value(self) -> int:
        return sum(d * n for d, n in self._counts.items())

    def as_dict(self) -> Dict[int, int]:
        return dict(self._counts)

    def __repr__(self) -> str:
        return f"CoinReserve({self._counts})"


class ChangeAllocator:
    """
    Выдача сдачи из резерва.
    Для каждого номинала needed = remaining // d, дальше решает _coins_to_give.
    Нехватка резерва не ошибка: результат частичный, недостача видна в ChangeResult.shortfall.
    """
    def __init__(
        self,
        reserve: CoinReserve,
        safety_threshold: int,
        audit_threshold: int,
        coin_specs: Optional[Mapping[int, CoinSpec]] = None,
    ):
        self.reserve = reserve
        self.safety_threshold = safety_threshold
        self.audit_threshold = audit_threshold
        self.coin_specs = coin_specs

    @property
    def smallest_denomination(self) -> int:
        return self.reserve.denominations[-1]

    def _coins_to_give(self, denomination: int, needed: int) -> int:
        available = self.reserve.count(denomination)
        if available == 0:
            return 0
        if available >= needed + self.safety_threshold:
            return needed
        # Мельче номинала нет, отдаём что есть
        if denomination == self.smallest_denomination:
            return min(available, needed)
        # Оставляем буфер, остаток уйдёт мелкими монетами
        if available <= self.safety_threshold:
            return max(0, min(available, needed - 1))
        return min(available, needed)

    def _is_usable(self, denomination: int) -> bool:
        if self.coin_specs is None:
            return True
        return verify_coin_authenticity(denomination, self.coin_specs)

    def make_change(self, amount: int) -> ChangeResult:
        """Выдать сдачу amount. Мутирует резерв ровно на выданные монеты."""
        result = ChangeResult(requested=max(0, amount))
        if amount <= 0:
            return result
        if amount > self.audit_threshold:
            self.audit_reserves()

        remaining = amount
        for denomination in self.reserve.denominations:
            if remaining <= 0:
                break
            if not self._is_usable(denomination):
                logger.debug("Denomination %d failed authenticity check, skipped", denomination)
                continue
            needed = remaining // denomination
            if needed <= 0:
                continue
            given = self.reserve.remove(denomination, self._coins_to_give(denomination, needed))
            if given > 0:
                result.coins[denomination] = given
                remaining -= given * denomination

        if result.complete:
            logger.debug("Change %d -> %s", amount, result.coins)
        else:
            logger.warning(
                "Coin reserve could not cover change: requested %d, dispensed %d, short %d",
                amount, result.dispensed, result.shortfall,
            )
        return result

    def audit_reserves(self) -> Dict[int, ReserveBand]:
        """Только чтение: полосы состояния резерва по номиналам."""
        bands = {d: classify_reserve(self.reserve.count(d)) for d in self.reserve.denominations}
        for denomination, band in bands.items():
            if band == ReserveBand.DANGER_LOW and denomination == self.smallest_denomination:
                logger.warning("Low on %d-unit coins (%d left)", denomination, self.reserve.count(denomination))
            else:
                logger.debug("Reserve %d: %s", denomination, band.value)
        return bands

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class Exchange:
    id: str
    name: str
    symbols: Tuple[str, ...]
    price_lookup: bool = False


EXCHANGES: Tuple[Exchange, ...] = (
    Exchange(
        id="binance",
        name="Binance Futures",
        symbols=("BTCUSDT", "ETHUSDT", "SOLUSDT", "XRPUSDT"),
        price_lookup=True,
    ),
    Exchange(id="bybit", name="Bybit", symbols=("BTCUSDT", "ETHUSDT", "BNBUSDT")),
    Exchange(id="okx", name="OKX", symbols=("BTCUSDT", "ETHUSDT", "DOGEUSDT")),
)


def find_exchange(exchange_id: Optional[str]) -> Optional[Exchange]:
    clean = (exchange_id or "").strip().lower()
    for exchange in EXCHANGES:
        if exchange.id == clean:
            return exchange
    return None

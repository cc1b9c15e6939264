"""Dashboard service - cached sales and balance aggregates."""

from collections.abc import Callable
from datetime import date, datetime
from typing import Any

import polars as pl
from loguru import logger

from app.models import CLIENTES_MAYORISTAS, CLIENTES_MINORISTAS, LIBRO_DIARIO, ProductRank, SalesBucket, SellerRank
from app.repositories.sheets import Row, SheetStore
from app.services.cache import CacheCategory, CacheResult, CacheSource, CacheStore, InvalidationBus, parse_category

STATS_KEY = "dashboardStats"
RECENT_KEY = "recentOperations"
RECENT_FULL_KEY = "recentOperationsFull"
FULL_HISTORY_LIMIT = 5000

# Movement types that add to / subtract from an account balance
INCOMING = ("Ingreso", "Venta", "Relevo Inicial", "Cancelación Deuda", "Cobro")
OUTGOING = ("Egreso", "Gasto", "Inversión Publicitaria", "Pago Eluter", "Devolución", "Compra Stock")

SALES_SCHEMA = {
    "fecha": pl.Datetime,
    "fecha_raw": pl.Utf8,
    "id": pl.Utf8,
    "vendedor": pl.Utf8,
    "monto": pl.Float64,
    "profit": pl.Float64,
    "costo": pl.Float64,
    "producto": pl.Utf8,
    "cliente": pl.Utf8,
    "modelo": pl.Utf8,
    "capacidad": pl.Utf8,
    "color": pl.Utf8,
    "divisa": pl.Utf8,
}

MOVEMENT_SCHEMA = {
    "tipo": pl.Utf8,
    "divisa": pl.Utf8,
    "cuenta": pl.Utf8,
    "monto": pl.Float64,
}


def _to_float(value: str) -> float:
    try:
        return float(value.replace(",", "")) if value else 0.0
    except ValueError:
        return 0.0


def _parse_date(value: str) -> datetime | None:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
        # Polars needs one timezone per column; keep everything naive local time
        return parsed.astimezone().replace(tzinfo=None) if parsed.tzinfo else parsed
    except ValueError:
        pass
    for fmt in ("%d/%m/%Y %H:%M:%S", "%d/%m/%Y"):
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    return None


def _sales_frame(rows: list[Row]) -> pl.DataFrame:
    data = [
        {
            "fecha": _parse_date(r.get("Fecha")),
            "fecha_raw": r.get("Fecha"),
            "id": r.get("ID") or r.get("N° ID"),
            "vendedor": r.get("Auditoría", "N/A"),
            "monto": _to_float(r.get("Monto")),
            "profit": _to_float(r.get("Profit Bruto")),
            "costo": _to_float(r.get("Costo del Producto")),
            "producto": r.get("Equipo | Producto"),
            "cliente": r.get("Nombre y Apellido"),
            "modelo": r.get("Modelo"),
            "capacidad": r.get("Tamaño"),
            "color": r.get("Color"),
            "divisa": r.get("Divisa", "USD"),
        }
        for r in rows
    ]
    return pl.DataFrame(data, schema=SALES_SCHEMA)


def _movement_frame(rows: list[Row]) -> pl.DataFrame:
    data = []
    for r in rows:
        divisa = r.get("Divisa", "USD").upper()
        data.append(
            {
                "tipo": r.get("Tipo de Movimiento"),
                "divisa": "ARS" if divisa == "PESOS" else divisa,
                "cuenta": r.get("Destino", "Caja"),
                "monto": _to_float(r.get("Monto")),
            }
        )
    return pl.DataFrame(data, schema=MOVEMENT_SCHEMA)


class DashboardService:
    """Aggregates for the dashboard, served through the chunked cache.

    Cache keys are registered with the invalidation bus at construction so a
    write to sales or operations expires every aggregate that reads them.
    """

    def __init__(
        self,
        sheets: SheetStore,
        cache: CacheStore,
        bus: InvalidationBus,
        ttl: int | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._sheets = sheets
        self._cache = cache
        self._bus = bus
        self._ttl = ttl
        self._clock = clock

        bus.register(CacheCategory.DASHBOARD, STATS_KEY)
        bus.register(CacheCategory.VENTAS, STATS_KEY)
        bus.register(CacheCategory.OPERACIONES, STATS_KEY)
        for key in (RECENT_KEY, RECENT_FULL_KEY):
            bus.register(CacheCategory.OPERACIONES, key)
            bus.register(CacheCategory.VENTAS, key)

    # Public API

    def dashboard_stats(self) -> CacheResult:
        """Sales buckets, rankings, latest operations and balances."""
        return self._cache.get_or_rebuild(STATS_KEY, self._build_stats, self._ttl)

    def recent_operations(self, limit: int = 50) -> CacheResult:
        """Latest retail, wholesale and journal rows, newest first.

        limit=0 reads the full history (up to FULL_HISTORY_LIMIT rows per sheet).
        """
        if limit < 0:
            raise ValueError(f"limit must be >= 0, got {limit}")
        effective = FULL_HISTORY_LIMIT if limit == 0 else limit
        key = RECENT_FULL_KEY if limit == 0 else RECENT_KEY

        def compute() -> dict[str, list[dict]]:
            return {
                "Minorista": [r.to_dict() for r in self._sheets.records(CLIENTES_MINORISTAS.name, effective)],
                "Mayorista": [r.to_dict() for r in self._sheets.records(CLIENTES_MAYORISTAS.name, effective)],
                "Gasto": [r.to_dict() for r in self._sheets.records(LIBRO_DIARIO.name, effective)],
            }

        # The short list is keyed by default size only; other sizes are computed live
        if limit not in (0, 50):
            return CacheResult(value=compute(), source=CacheSource.NO_CACHE)
        return self._cache.get_or_rebuild(key, compute, self._ttl)

    def rebuild(self, category: str) -> dict[str, Any]:
        """Invalidate a category and rebuild the dashboard when it is affected."""
        category = parse_category(category)
        invalidated = self._bus.invalidate(category)

        rebuilt = None
        if STATS_KEY in self._bus.keys(category):
            rebuilt = self.dashboard_stats()

        return {
            "category": str(category),
            "invalidated": invalidated,
            "rebuilt": rebuilt is not None,
            "data": rebuilt.value if rebuilt else None,
        }

    # Computation

    def _build_stats(self) -> dict[str, Any]:
        ventas = self._sheets.records(CLIENTES_MINORISTAS.name) + self._sheets.records(CLIENTES_MAYORISTAS.name)
        movimientos = self._sheets.records(LIBRO_DIARIO.name)
        logger.info("Computing dashboard stats from {} sales, {} movements", len(ventas), len(movimientos))

        sales = _sales_frame(ventas)
        now = self._clock()
        return {
            "stats": self._buckets(sales, now),
            "top_vendedores": self._top_sellers(sales),
            "ranking_productos": self._top_products(sales),
            "ultimas_operaciones": self._latest(sales),
            "balances": self._balances(_movement_frame(movimientos)),
            "ultima_modificacion": now.isoformat(),
        }

    @staticmethod
    def _buckets(sales: pl.DataFrame, now: datetime) -> dict[str, dict]:
        day = datetime.combine(now.date(), datetime.min.time())
        starts = {
            "hoy": day,
            "mes": datetime.combine(date(now.year, now.month, 1), datetime.min.time()),
            "anio": datetime.combine(date(now.year, 1, 1), datetime.min.time()),
        }

        def bucket(frame: pl.DataFrame) -> dict:
            return SalesBucket(
                total=float(frame["monto"].sum()),
                count=frame.height,
                profit=float(frame["profit"].sum()),
            ).to_dict()

        result = {name: bucket(sales.filter(pl.col("fecha") >= start)) for name, start in starts.items()}
        result["historico"] = bucket(sales)
        return result

    @staticmethod
    def _top_sellers(sales: pl.DataFrame, n: int = 5) -> list[dict]:
        ranked = (
            sales.group_by("vendedor", maintain_order=True)
            .agg(
                pl.col("monto").sum().alias("total"),
                pl.len().alias("count"),
                pl.col("profit").sum().alias("profit"),
            )
            .sort("total", descending=True, maintain_order=True)
            .head(n)
        )
        return [
            SellerRank(name=r["vendedor"], total=r["total"], count=r["count"], profit=r["profit"]).to_dict()
            for r in ranked.iter_rows(named=True)
        ]

    @staticmethod
    def _top_products(sales: pl.DataFrame, n: int = 5) -> list[dict]:
        ranked = (
            sales.filter(pl.col("producto") != "")
            .group_by("producto", maintain_order=True)
            .agg(
                pl.len().alias("cantidad"),
                pl.col("costo").first(),
                pl.col("monto").first(),
            )
            .sort("cantidad", descending=True, maintain_order=True)
            .head(n)
        )
        return [
            ProductRank(name=r["producto"], cantidad=r["cantidad"], costo=r["costo"], monto=r["monto"]).to_dict()
            for r in ranked.iter_rows(named=True)
        ]

    @staticmethod
    def _latest(sales: pl.DataFrame, n: int = 10) -> list[dict]:
        latest = sales.sort("fecha", descending=True, nulls_last=True, maintain_order=True).head(n)
        return [
            {
                "id": r["id"],
                "fecha": r["fecha_raw"],
                "cliente": r["cliente"],
                "tipo_producto": r["producto"],
                "modelo": r["modelo"],
                "capacidad": r["capacidad"],
                "color": r["color"],
                "monto": r["monto"],
                "auditoria": r["vendedor"],
                "tipo": "Venta",
                "divisa": r["divisa"],
            }
            for r in latest.iter_rows(named=True)
        ]

    @staticmethod
    def _balances(movements: pl.DataFrame) -> dict[str, dict[str, float]]:
        signed = (
            movements.with_columns(
                pl.when(pl.col("tipo").is_in(list(INCOMING)))
                .then(1.0)
                .when(pl.col("tipo").is_in(list(OUTGOING)))
                .then(-1.0)
                .otherwise(0.0)
                .alias("sign")
            )
            .filter(pl.col("sign") != 0)
            .group_by("divisa", "cuenta", maintain_order=True)
            .agg((pl.col("monto") * pl.col("sign")).sum().alias("saldo"))
        )

        balances: dict[str, dict[str, float]] = {"ARS": {}, "USD": {}}
        for r in signed.iter_rows(named=True):
            balances.setdefault(r["divisa"], {})[r["cuenta"]] = r["saldo"]
        return balances

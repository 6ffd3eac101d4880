"""Aggregates shown on the dashboard and orders pages."""

from __future__ import annotations

import logging
from collections import Counter
from datetime import date

from dateutil.relativedelta import relativedelta

from database.repository import Repository
from services.clients.client_service import list_clients
from services.equipment.dto import EquipmentDTO
from services.equipment.equipment_service import list_equipment
from services.orders.dto import ServiceOrderDTO
from services.orders.order_service import list_orders
from services.orders.workflow import COMPLETED_STATUSES, SELECTABLE_STATUSES, OrderStatus

logger = logging.getLogger(__name__)

UNASSIGNED_TECHNICIAN = "Não atribuído"

_MONTH_ABBR = ("Jan", "Fev", "Mar", "Abr", "Mai", "Jun", "Jul", "Ago", "Set", "Out", "Nov", "Dez")

_COMPLETED = {status.value for status in COMPLETED_STATUSES}


def status_counts(orders: list[ServiceOrderDTO]) -> dict[str, int]:
    """Number of orders per selectable status, zeros included."""
    counts = Counter(order.status for order in orders)
    return {status.value: counts.get(status.value, 0) for status in SELECTABLE_STATUSES}


def client_stats(
    active_clients: int, orders: list[ServiceOrderDTO], today: date
) -> dict[str, int]:
    year_ago = today - relativedelta(years=1)
    in_service = {
        OrderStatus.OPEN.value,
        OrderStatus.DIAGNOSIS.value,
        OrderStatus.IN_PROGRESS.value,
    }
    return {
        "total": active_clients,
        "with_recent_orders": len(
            {o.client_id for o in orders if o.entry_date and o.entry_date > year_ago}
        ),
        "with_open_orders": len({o.client_id for o in orders if o.status in in_service}),
    }


def equipment_stats(active_equipment: int, orders: list[ServiceOrderDTO]) -> dict[str, int]:
    def distinct(*statuses: OrderStatus) -> int:
        wanted = {s.value for s in statuses}
        return len({o.equipment_id for o in orders if o.status in wanted})

    return {
        "total": active_equipment,
        "in_maintenance": distinct(OrderStatus.IN_PROGRESS, OrderStatus.DIAGNOSIS),
        "ready_for_delivery": distinct(OrderStatus.FINISHED),
        "waiting_approval": distinct(OrderStatus.AWAITING_APPROVAL),
    }


def technician_performance(orders: list[ServiceOrderDTO]) -> list[dict]:
    counts = Counter(
        (o.execution.technician or "").strip() or UNASSIGNED_TECHNICIAN
        for o in orders
        if o.status in _COMPLETED
    )
    return [
        {"technician": name, "completed": total}
        for name, total in sorted(counts.items(), key=lambda item: -item[1])
    ]


def top_brands(
    orders: list[ServiceOrderDTO], equipment: dict[str, EquipmentDTO], limit: int = 5
) -> list[dict]:
    """Brands ranked by number of orders; orders without equipment are skipped."""
    counts: Counter[str] = Counter()
    for order in orders:
        eq = equipment.get(order.equipment_id)
        if eq is not None:
            counts[eq.brand] += 1
    ranked = sorted(counts.items(), key=lambda item: -item[1])[:limit]
    return [{"brand": brand, "count": count} for brand, count in ranked]


def repair_time_by_month(orders: list[ServiceOrderDTO], months: int = 6) -> list[dict]:
    """Average repair days per entry month of completed orders, oldest first."""
    buckets: dict[date, list[int]] = {}
    for order in orders:
        if order.status not in _COMPLETED or not order.exit_date or not order.entry_date:
            continue
        days = (order.exit_date - order.entry_date).days
        if days < 0:
            continue
        buckets.setdefault(order.entry_date.replace(day=1), []).append(days)

    result = []
    for month in sorted(buckets)[-months:]:
        durations = buckets[month]
        result.append(
            {
                "month": f"{_MONTH_ABBR[month.month - 1]}/{month.year % 100:02d}",
                "days": round(sum(durations) / len(durations), 1),
                "count": len(durations),
            }
        )
    return result


def recent_orders(orders: list[ServiceOrderDTO], limit: int = 5) -> list[ServiceOrderDTO]:
    return sorted(orders, key=lambda o: o.entry_date or date.min, reverse=True)[:limit]


def get_dashboard_stats(
    orders_repo: Repository,
    clients_repo: Repository,
    equipment_repo: Repository,
    today: date | None = None,
) -> dict:
    """Collect every dashboard aggregate from non-archived records."""
    today = today or date.today()
    orders = list_orders(orders_repo)
    clients = list_clients(clients_repo)
    equipment = list_equipment(equipment_repo)
    all_equipment = {eq.id: eq for eq in list_equipment(equipment_repo, include_archived=True)}

    stats = {
        "status_counts": status_counts(orders),
        "clients": client_stats(len(clients), orders, today),
        "equipment": equipment_stats(len(equipment), orders),
        "technicians": technician_performance(orders),
        "top_brands": top_brands(orders, all_equipment),
        "repair_time": repair_time_by_month(orders),
        "recent_orders": recent_orders(orders),
    }
    logger.debug("Dashboard stats computed for %s orders", len(orders))
    return stats

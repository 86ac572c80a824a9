"""Stock alert service — sweeps, lists, acknowledges and deletes low-stock alerts.

Alerts are normally raised by ``StockLevelEventHandler`` as orders commit.
``check_and_create_alerts`` is the catch-up sweep for stock that went low
some other way (restocks, manual corrections).
"""

from dataclasses import dataclass
from datetime import UTC, datetime

import structlog
from protean import UnitOfWork
from protean.utils.globals import current_domain

from eshop.catalogue.product import Product
from eshop.inventory.alert import StockAlert

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class StockAlertView:
    id: int
    product_id: int
    product_name: str
    quantity_at_trigger: int
    triggered_at: datetime
    is_acknowledged: bool


def _to_view(alert: StockAlert) -> StockAlertView:
    triggered_at = alert.triggered_at
    if triggered_at.tzinfo is None:
        triggered_at = triggered_at.replace(tzinfo=UTC)
    return StockAlertView(
        id=alert.id,
        product_id=alert.product_id,
        product_name=alert.product_name,
        quantity_at_trigger=alert.quantity_at_trigger,
        triggered_at=triggered_at,
        is_acknowledged=alert.is_acknowledged,
    )


def _find(alert_id) -> StockAlert | None:
    return current_domain.repository_for(StockAlert)._dao.query.filter(id=alert_id).all().first


class StockAlertService:
    # -------------------------------------------------------------------
    # Sweep
    # -------------------------------------------------------------------
    def check_and_create_alerts(self, product_ids=None) -> list[StockAlertView]:
        """Alert products at/below threshold that have no open alert yet.

        ``product_ids`` narrows the sweep; ``None`` checks the whole catalogue.
        """
        with UnitOfWork():
            products = current_domain.repository_for(Product)
            if product_ids is None:
                candidates = products.low_on_stock()
            else:
                candidates = [p for p in products.get_many(product_ids).values() if p.is_low_on_stock]

            alerts = current_domain.repository_for(StockAlert)
            open_alerts = {
                alert.product_id for alert in alerts._dao.query.filter(is_acknowledged=False).limit(None).all().items
            }

            created = []
            for product in sorted(candidates, key=lambda p: p.id):
                if product.id in open_alerts:
                    continue
                alert = StockAlert.trigger(product.id, product.name, product.stock_quantity)
                alerts.add(alert)
                created.append(alert)

        views = [_to_view(alert) for alert in created]
        if views:
            logger.warning("Low stock alerts raised by sweep", count=len(views))
        return views

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def list_alerts(self) -> list[StockAlertView]:
        alerts = (
            current_domain.repository_for(StockAlert)
            ._dao.query.order_by(["-triggered_at", "-id"])
            .limit(None)
            .all()
            .items
        )
        return [_to_view(alert) for alert in alerts]

    def get_alert(self, alert_id: int) -> StockAlertView | None:
        alert = _find(alert_id)
        return _to_view(alert) if alert else None

    def unacknowledged_count(self) -> int:
        return current_domain.repository_for(StockAlert)._dao.query.filter(is_acknowledged=False).count()

    # -------------------------------------------------------------------
    # Acknowledge / delete
    # -------------------------------------------------------------------
    def acknowledge(self, alert_id: int) -> bool:
        alert = _find(alert_id)
        if alert is None:
            return False

        alert.acknowledge()
        current_domain.repository_for(StockAlert).add(alert)

        logger.info("Stock alert acknowledged", alert_id=alert_id)
        return True

    def delete(self, alert_id: int) -> bool:
        alert = _find(alert_id)
        if alert is None:
            return False

        current_domain.repository_for(StockAlert)._dao.delete(alert)

        logger.info("Stock alert deleted", alert_id=alert_id)
        return True

# stock_forecaster/core/insights.py
from typing import Dict, List, Sequence, Union

from ..models import StockStatus, PeriodUnit

# Demand per period above which an item is flagged as high demand
HIGH_DEMAND_THRESHOLD = {
    PeriodUnit.DAY: 10.0,
    PeriodUnit.WEEK: 50.0,
}

HEALTHY_MESSAGE = "Stock levels appear healthy. No action required."

def generate_insights(
    item,
    stock_status: Sequence[Dict],
    demand_estimate: float,
    period_unit: Union[PeriodUnit, str] = PeriodUnit.WEEK
) -> List[str]:
    """Derive short advisories from a classified stock trajectory.
    
    Args:
        item: Inventory item (model or mapping)
        stock_status: Classified trajectory entries
        demand_estimate: Demand estimate per period
        period_unit: Unit of the periods and of the demand estimate
        
    Returns:
        List of insight messages, never empty
    """
    unit = PeriodUnit(period_unit) if not isinstance(period_unit, PeriodUnit) else period_unit
    insights = []
    
    forward = [entry for entry in stock_status if not entry.get('is_historical')]
    for position, entry in enumerate(forward, start=1):
        if entry['status'] is StockStatus.ORDER:
            insights.append(
                f"Will be out of stock in {_periods(position, unit)}. Immediate action required."
            )
            break
    
    if demand_estimate > HIGH_DEMAND_THRESHOLD[unit]:
        insights.append(
            f"High demand detected ({demand_estimate:.1f} units/{unit.value}). Consider increasing EOQ."
        )
    
    if _field(item, 'current_stock') > _field(item, 'economic_order_quantity') * 2:
        insights.append("Overstock situation. Consider reducing next order quantity.")
    
    if not insights:
        insights.append(HEALTHY_MESSAGE)
    
    return insights

def _periods(count: int, unit: PeriodUnit) -> str:
    return f"{count} {unit.value}" if count == 1 else f"{count} {unit.value}s"

def _field(item, key):
    if isinstance(item, dict):
        return item[key]
    return getattr(item, key)

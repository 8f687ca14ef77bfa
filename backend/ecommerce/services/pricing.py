# backend/ecommerce/services/pricing.py
"""
Cálculo de precios de paquetes (bundles).

Un paquete tiene un precio de venta y, opcionalmente, un precio original
explícito. Si no lo tiene, se compara contra la suma de los precios efectivos
de sus items (custom_price si existe, si no el precio del producto) por su
cantidad. El descuento nunca es negativo y un total de referencia cero da un
porcentaje de 0.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Iterable, Optional, Union

from pydantic import BaseModel

Number = Union[int, float, Decimal]

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")


class PackagePricing(BaseModel):
    """Resumen de precios de un paquete."""
    total_items: int
    total_products: int
    items_total: float
    original_total: float
    final_price: float
    discount: float
    discount_percentage: int
    per_product_savings: int
    savings: Optional[str] = None


def to_decimal(value: Optional[Number]) -> Decimal:
    if value is None:
        return _ZERO
    if isinstance(value, Decimal):
        return value
    # str() evita arrastrar errores binarios de los float
    return Decimal(str(value))


def round_half_up(value: Decimal) -> int:
    """Redondeo aritmético (.5 hacia arriba), no el redondeo bancario de round()."""
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def effective_unit_price(item: Any) -> Decimal:
    """
    Precio unitario efectivo de un item de paquete.

    custom_price tiene prioridad; un custom_price nulo o cero se considera
    no definido y se usa el precio de catálogo del producto.
    """
    custom_price = getattr(item, "custom_price", None)
    if custom_price:
        return to_decimal(custom_price)
    return to_decimal(item.product.price)


def item_total(item: Any) -> Decimal:
    return effective_unit_price(item) * item.quantity


def compute_discount(sale_price: Number, reference_total: Number) -> Decimal:
    """discount = reference_total - sale_price, con suelo en 0."""
    discount = to_decimal(reference_total) - to_decimal(sale_price)
    return discount if discount > _ZERO else _ZERO


def compute_discount_percentage(discount: Number, reference_total: Number) -> int:
    """round(discount / reference_total * 100); 0 si el total de referencia es 0."""
    reference = to_decimal(reference_total)
    if reference <= _ZERO:
        return 0
    percentage = round_half_up(to_decimal(discount) / reference * _HUNDRED)
    return min(max(percentage, 0), 100)


def compute_package_pricing(
    sale_price: Number,
    original_price: Optional[Number],
    items: Iterable[Any],
) -> PackagePricing:
    """
    Calcula el resumen de precios de un paquete.

    Args:
        sale_price: Precio de venta del paquete.
        original_price: Precio original explícito, o None para usar la suma
            de los items.
        items: Items con quantity, custom_price y product.price.

    Returns:
        PackagePricing con descuento, porcentaje y totales.
    """
    items = list(items)
    items_total = sum((item_total(item) for item in items), _ZERO)
    total_products = sum(item.quantity for item in items)

    # Un original_price a 0 cuenta como no definido
    reference_total = to_decimal(original_price) if original_price else items_total

    discount = compute_discount(sale_price, reference_total)
    percentage = compute_discount_percentage(discount, reference_total)
    per_product = round_half_up(discount / total_products) if total_products else 0

    return PackagePricing(
        total_items=len(items),
        total_products=total_products,
        items_total=float(items_total),
        original_total=float(reference_total),
        final_price=float(to_decimal(sale_price)),
        discount=float(discount),
        discount_percentage=percentage,
        per_product_savings=per_product,
        savings=f"You save {discount:f}" if discount > _ZERO else None,
    )

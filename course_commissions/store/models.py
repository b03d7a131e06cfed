"""Store order models read by the commissions module."""

from django.db import models
from django.utils.translation import gettext_lazy as _


class Product(models.Model):
    name = models.CharField(_("Name"), max_length=200)
    price = models.DecimalField(
        _("Price"), max_digits=10, decimal_places=2, null=True, blank=True
    )

    class Meta:
        db_table = 'store_product'
        verbose_name = _("Product")
        verbose_name_plural = _("Products")

    def __str__(self):
        return self.name


class Order(models.Model):
    STATUS_CHOICES = [
        ('pending', _("Pending payment")),
        ('processing', _("Processing")),
        ('on-hold', _("On hold")),
        ('completed', _("Completed")),
        ('cancelled', _("Cancelled")),
        ('refunded', _("Refunded")),
        ('failed', _("Failed")),
    ]

    status = models.CharField(
        _("Status"), max_length=20, choices=STATUS_CHOICES, default='pending'
    )
    created_at = models.DateTimeField(_("Created"), auto_now_add=True)

    class Meta:
        db_table = 'store_order'
        verbose_name = _("Order")
        verbose_name_plural = _("Orders")
        ordering = ['-created_at']

    def __str__(self):
        return f"Order #{self.pk} ({self.status})"


class OrderItem(models.Model):
    """One row of an order. Product and course links live in ``meta``."""

    LINE_ITEM = 'line_item'

    TYPE_CHOICES = [
        (LINE_ITEM, _("Line item")),
        ('shipping', _("Shipping")),
        ('fee', _("Fee")),
        ('coupon', _("Coupon")),
    ]

    order = models.ForeignKey(
        Order, on_delete=models.CASCADE, related_name='items',
        verbose_name=_("Order")
    )
    name = models.CharField(_("Name"), max_length=200, blank=True)
    item_type = models.CharField(
        _("Type"), max_length=20, choices=TYPE_CHOICES, default=LINE_ITEM
    )
    line_total = models.DecimalField(
        _("Line Total"), max_digits=10, decimal_places=2, null=True, blank=True
    )

    class Meta:
        db_table = 'store_order_item'
        verbose_name = _("Order Item")
        verbose_name_plural = _("Order Items")

    def __str__(self):
        return self.name or f"Item #{self.pk}"

    def get_meta(self, key):
        row = self.meta.filter(meta_key=key).first()
        return row.meta_value if row else None


class OrderItemMeta(models.Model):
    PRODUCT_ID = '_product_id'
    COURSE_ID = '_course_id'
    LINE_TOTAL = '_line_total'

    item = models.ForeignKey(
        OrderItem, on_delete=models.CASCADE, related_name='meta',
        verbose_name=_("Item")
    )
    meta_key = models.CharField(_("Key"), max_length=255, db_index=True)
    meta_value = models.TextField(_("Value"), blank=True)

    class Meta:
        db_table = 'store_order_itemmeta'
        verbose_name = _("Order Item Meta")
        verbose_name_plural = _("Order Item Meta")

    def __str__(self):
        return f"{self.meta_key}={self.meta_value}"

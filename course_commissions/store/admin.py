from django.contrib import admin

from .models import Order, OrderItem, OrderItemMeta, Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ['id', 'name', 'price']
    search_fields = ['name']


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ['id', 'status', 'created_at']
    list_filter = ['status']
    date_hierarchy = 'created_at'
    inlines = [OrderItemInline]


@admin.register(OrderItemMeta)
class OrderItemMetaAdmin(admin.ModelAdmin):
    list_display = ['item', 'meta_key', 'meta_value']
    list_filter = ['meta_key']

from django.contrib import admin, messages
from django.utils.html import format_html

from .models import RewardCategory, RewardProduct
from .services import (
    CategoryInUseError,
    delete_category,
    delete_product,
    reward_image_url,
)


@admin.register(RewardCategory)
class RewardCategoryAdmin(admin.ModelAdmin):
    """Admin interface for reward categories."""

    list_display = ['name', 'product_count', 'created_at', 'updated_at']
    search_fields = ['name']
    readonly_fields = ['created_at', 'updated_at']
    ordering = ['name']

    def product_count(self, obj):
        return RewardProduct.objects.filter(category_name=obj.name).count()
    product_count.short_description = 'Products'

    def has_delete_permission(self, request, obj=None):
        if obj is not None and RewardProduct.objects.filter(category_name=obj.name).exists():
            return False
        return super().has_delete_permission(request, obj)

    def delete_model(self, request, obj):
        delete_category(category_id=obj.id)

    def delete_queryset(self, request, queryset):
        for category in queryset:
            try:
                delete_category(category_id=category.id)
            except CategoryInUseError as e:
                self.message_user(request, str(e), level=messages.ERROR)


@admin.register(RewardProduct)
class RewardProductAdmin(admin.ModelAdmin):
    """Admin interface for reward products."""

    list_display = ['name', 'category_name', 'price', 'image_preview', 'created_at']
    list_filter = ['category_name', 'created_at']
    search_fields = ['name', 'category_name']
    readonly_fields = ['image', 'image_preview', 'created_at', 'updated_at']
    date_hierarchy = 'created_at'
    ordering = ['-created_at']

    fieldsets = (
        ('Basic Information', {
            'fields': ('name', 'category_name', 'price')
        }),
        ('Image', {
            'fields': ('image', 'image_preview'),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )

    def image_preview(self, obj):
        url = reward_image_url(obj.image)
        if not url:
            return '-'
        return format_html('<img src="{}" style="max-height: 48px;" />', url)
    image_preview.short_description = 'Preview'

    def delete_model(self, request, obj):
        delete_product(product_id=obj.id)

    def delete_queryset(self, request, queryset):
        for product in queryset:
            delete_product(product_id=product.id)

from django.contrib import admin
from payment_app.models import Payment


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ('id', 'user', 'course', 'amount', 'currency', 'status', 'gateway_payment_id', 'created_at')
    list_filter = ('status', 'currency')
    search_fields = ('gateway_order_id', 'gateway_payment_id', 'user__username', 'course__title')
    readonly_fields = ('id', 'raw', 'created_at', 'updated_at')

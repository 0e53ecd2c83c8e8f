from django.contrib import admin, messages
from django.utils import translation
from django.utils.html import format_html

from .models import Debt, DebtStatus
from .services import dispatch_notification, mark_registered, mark_resolved


STATUS_COLORS = {
    DebtStatus.PENDING: '#E5C49A',
    DebtStatus.NOTIFIED: '#4C6A92',
    DebtStatus.VIEWED: '#A47449',
    DebtStatus.REGISTERED: '#6B5E8E',
    DebtStatus.RESOLVED: '#6B8E5E',
}


@admin.register(Debt)
class DebtAdmin(admin.ModelAdmin):
    list_display = [
        'customer_email',
        'amount',
        'due_date',
        'status_badge',
        'customer_user',
        'admin_user',
        'notified_at',
        'created_at',
    ]
    list_filter = ['status', 'due_date', 'created_at']
    search_fields = ['customer_email', 'description']
    ordering = ['-created_at']
    date_hierarchy = 'created_at'
    list_select_related = ['customer_user', 'admin_user']
    raw_id_fields = ['customer_user', 'admin_user']

    readonly_fields = [
        'token',
        'notified_at',
        'viewed_at',
        'created_at',
        'updated_at',
    ]

    fieldsets = (
        ('Debt', {
            'fields': ('amount', 'due_date', 'customer_email', 'description', 'status')
        }),
        ('Accounts', {
            'fields': ('customer_user', 'admin_user'),
        }),
        ('Public link', {
            'fields': ('token',),
            'classes': ('collapse',),
        }),
        ('Timestamps', {
            'fields': ('notified_at', 'viewed_at', 'created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )

    actions = ['send_notification', 'mark_as_registered', 'mark_as_resolved']

    def status_badge(self, obj):
        return format_html(
            '<span style="background: {}; color: white; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            STATUS_COLORS.get(obj.status, '#ccc'),
            obj.get_status_display()
        )
    status_badge.short_description = 'Status'
    status_badge.admin_order_field = 'status'

    @admin.action(description='Send notification email')
    def send_notification(self, request, queryset):
        locale = translation.get_language()
        delivered = failed = 0
        for debt in queryset:
            result = dispatch_notification(debt=debt, locale=locale)
            if result.notification_delivered:
                delivered += 1
            else:
                failed += 1

        self.message_user(request, f'Sent {delivered} notification(s).')
        if failed:
            self.message_user(
                request,
                f'{failed} notification(s) could not be delivered.',
                level=messages.WARNING
            )

    @admin.action(description='Mark as registered')
    def mark_as_registered(self, request, queryset):
        for debt in queryset:
            mark_registered(debt)
        self.message_user(request, f'Marked {queryset.count()} debt(s) as registered.')

    @admin.action(description='Mark as resolved')
    def mark_as_resolved(self, request, queryset):
        for debt in queryset:
            mark_resolved(debt)
        self.message_user(request, f'Marked {queryset.count()} debt(s) as resolved.')

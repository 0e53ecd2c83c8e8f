from django.contrib import admin, messages
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.html import format_html

from .models import User, UserRole
from .services import AdminHasDebtsError, delete_user_account


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """
    Admin interface for accounts.

    Lists admins and customers with role and confirmation badges.
    Deletion goes through the account service so an admin who still
    owns debts is kept.
    """

    list_display = [
        'email',
        'display_name',
        'role_badge',
        'is_active_badge',
        'email_verified_badge',
        'created_at',
        'last_login',
        'verification_token',
        'password_reset_token',
    ]

    list_filter = [
        'role',
        'is_active',
        'email_verified',
        'created_at',
    ]

    search_fields = [
        'email',
        'display_name',
    ]

    ordering = ['-created_at']
    date_hierarchy = 'created_at'

    fieldsets = (
        ('Basic Information', {
            'fields': ('email', 'display_name', 'role', 'password')
        }),
        ('Permissions', {
            'fields': ('is_active', 'is_staff', 'is_superuser'),
        }),
        ('Verification', {
            'fields': ('email_verified', 'verification_token', 'password_reset_token'),
            'classes': ('collapse',),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'last_login'),
            'classes': ('collapse',),
        }),
    )

    add_fieldsets = (
        ('Create User', {
            'classes': ('wide',),
            'fields': ('email', 'display_name', 'role', 'password1', 'password2'),
        }),
    )

    readonly_fields = [
        'created_at',
        'last_login',
    ]

    filter_horizontal = []

    def role_badge(self, obj):
        """Display role as colored badge."""
        if obj.role == UserRole.ADMIN:
            return format_html(
                '<span style="background: #8E3B46; color: white; padding: 3px 8px; '
                'border-radius: 10px; font-size: 11px;">Admin</span>'
            )
        return format_html(
            '<span style="background: #4C6A92; color: white; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">Customer</span>'
        )
    role_badge.short_description = 'Role'
    role_badge.admin_order_field = 'role'

    def is_active_badge(self, obj):
        if obj.is_active:
            return format_html(
                '<span style="background: #6B8E5E; color: white; padding: 3px 8px; '
                'border-radius: 10px; font-size: 11px;">Active</span>'
            )
        return format_html(
            '<span style="background: #B85C5C; color: white; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">Inactive</span>'
        )
    is_active_badge.short_description = 'Status'
    is_active_badge.admin_order_field = 'is_active'

    def email_verified_badge(self, obj):
        if obj.email_verified:
            return format_html(
                '<span style="background: #6B8E5E; color: white; padding: 3px 8px; '
                'border-radius: 10px; font-size: 11px;">Confirmed</span>'
            )
        return format_html(
            '<span style="background: #E5C49A; color: #2C1810; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">Pending</span>'
        )
    email_verified_badge.short_description = 'Email'
    email_verified_badge.admin_order_field = 'email_verified'

    actions = [
        'activate_users',
        'deactivate_users',
        'delete_accounts',
    ]

    def get_actions(self, request):
        actions = super().get_actions(request)
        # Bulk delete would bypass the account service
        actions.pop('delete_selected', None)
        return actions

    @admin.action(description='Activate selected users')
    def activate_users(self, request, queryset):
        count = queryset.update(is_active=True)
        self.message_user(request, f'Activated {count} user(s).')

    @admin.action(description='Deactivate selected users')
    def deactivate_users(self, request, queryset):
        """Deactivate selected users (excludes superusers)."""
        safe_queryset = queryset.filter(is_superuser=False)
        count = safe_queryset.update(is_active=False)
        skipped = queryset.count() - count
        msg = f'Deactivated {count} user(s).'
        if skipped:
            msg += f' Skipped {skipped} superuser(s).'
        self.message_user(request, msg)

    @admin.action(description='Delete selected accounts')
    def delete_accounts(self, request, queryset):
        deleted = 0
        kept = []
        for user in queryset:
            try:
                delete_user_account(user_id=user.pk, deleted_by=request.user)
                deleted += 1
            except AdminHasDebtsError:
                kept.append(user.email)

        self.message_user(request, f'Deleted {deleted} account(s).')
        if kept:
            self.message_user(
                request,
                f'Kept admins that still own debts: {", ".join(kept)}',
                level=messages.WARNING
            )

    def delete_model(self, request, obj):
        try:
            delete_user_account(user_id=obj.pk, deleted_by=request.user)
        except AdminHasDebtsError as e:
            self.message_user(request, str(e), level=messages.ERROR)

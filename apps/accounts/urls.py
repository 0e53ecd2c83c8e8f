from django.urls import path
from . import views

app_name = 'users'

urlpatterns = [
    # Authentication
    path('uzivatele/registrace/', views.register, name='register'),
    path('uzivatele/prihlaseni/', views.login, name='login'),
    path('uzivatele/odhlaseni/', views.logout, name='logout'),

    # Email confirmation
    path('uzivatele/potvrzeni/', views.confirm_email, name='confirm'),

    # Password reset
    path('uzivatele/heslo/', views.password_reset_request, name='password-reset'),
    path('uzivatele/heslo/nove/', views.password_reset_confirm, name='password-reset-confirm'),

    # Own account
    path('uzivatele/ucet/', views.current_account, name='current-user'),

    # Admin account management
    path('admin/uzivatele/<uuid:pk>/', views.delete_account, name='admin-delete-user'),
]

from django.urls import path, include
from rest_framework.routers import SimpleRouter
from . import views

app_name = 'debts'

admin_router = SimpleRouter()
admin_router.register(r'pohledavky', views.AdminDebtViewSet, basename='admin-debt')

customer_router = SimpleRouter()
customer_router.register(r'pohledavky', views.CustomerDebtViewSet, basename='customer-debt')

urlpatterns = [
    # Public token page
    # GET    /{locale}/pohledavky/{token}/                         - Debt by token
    path('pohledavky/<str:token>/', views.public_debt, name='public-debt'),

    # Admin
    # GET    /{locale}/admin/                                      - Dashboard
    # GET    /{locale}/admin/pohledavky/                           - List debts
    # POST   /{locale}/admin/pohledavky/                           - Create debt (sends email)
    # GET    /{locale}/admin/pohledavky/{id}/                      - Debt detail
    # PUT    /{locale}/admin/pohledavky/{id}/                      - Update debt
    # PATCH  /{locale}/admin/pohledavky/{id}/                      - Partial update
    # DELETE /{locale}/admin/pohledavky/{id}/                      - Delete debt
    # PATCH  /{locale}/admin/pohledavky/{id}/send_notification/    - Resend email
    path('admin/', views.admin_dashboard, name='admin-dashboard'),
    path('admin/', include(admin_router.urls)),

    # Customer
    # GET    /{locale}/zakaznik/pohledavky/                        - Own debts
    # GET    /{locale}/zakaznik/pohledavky/{id}/                   - Own debt detail
    path('zakaznik/', include(customer_router.urls)),
]

"""
URL configuration for the Dluzirna project.

Pages live under a locale prefix (/cs/..., /en/...); the bare root
redirects to the default locale. Health, API docs and the Django admin
site sit outside the prefix.
"""
from django.conf import settings
from django.conf.urls.i18n import i18n_patterns
from django.contrib import admin
from django.urls import path, include
from django.views.generic import RedirectView
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView
from rest_framework_simplejwt.views import TokenRefreshView

from config.views import health_check, homepage

urlpatterns = [
    # Root -> default locale
    path('', RedirectView.as_view(url=f'/{settings.LANGUAGE_CODE}/', permanent=False), name='root'),

    # Health check (for Render)
    path('api/health/', health_check, name='health-check'),

    # Django admin site
    path('django-admin/', admin.site.urls),

    # API Documentation
    path('api/schema/', SpectacularAPIView.as_view(), name='api-schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='api-schema'), name='api-docs'),

    # JWT refresh
    path('api/auth/token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
]

urlpatterns += i18n_patterns(
    path('', homepage, name='home'),
    path('', include('apps.accounts.urls')),
    path('', include('apps.debts.urls')),
    prefix_default_language=True,
)


# Custom error handlers
handler404 = 'config.views.error_404'
handler500 = 'config.views.error_500'

"""URL configuration for ClubFlow project.

The `urlpatterns` list routes URLs to views. It includes both Django admin
and application‑level routers provided by Django Rest Framework and each app.
Club-scoped resources live under ``clubs/<club_id>/`` so every request
carries its club context explicitly.
"""
from django.contrib import admin  # type: ignore
from django.urls import path, include  # type: ignore
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView  # type: ignore
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView  # type: ignore

# API versioning. v1 is our initial version; future versions can be added here.

urlpatterns = [
    path('admin/', admin.site.urls),
    # Token endpoints for API clients
    path('api/v1/auth/token/', TokenObtainPairView.as_view(), name='token-obtain'),
    path('api/v1/auth/token/refresh/', TokenRefreshView.as_view(), name='token-refresh'),
    # Application URLs
    path('api/v1/clubs/', include('apps.clubs.urls')),
    path('api/v1/clubs/<int:club_id>/facilities/', include('apps.facilities.urls')),
    path('api/v1/clubs/<int:club_id>/', include('apps.bookings.urls')),
    path('api/v1/clubs/<int:club_id>/calendar/', include('apps.scheduling.urls')),
    # API schema
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
]

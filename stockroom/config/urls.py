"""
URL configuration for the stockroom project.

Every app mounts its routes under ``api/v1/``.
"""
from django.contrib import admin
from django.urls import path, include

admin.site.site_header = "Stockroom Admin Panel"
admin.site.site_title = "Stockroom Admin Portal"
admin.site.index_title = "Inventory and orders"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/v1/', include('stockroom.core.urls')),
    path('api/v1/', include('stockroom.catalog.urls')),
    path('api/v1/', include('stockroom.inventory.urls')),
    path('api/v1/', include('stockroom.orders.urls')),
]

from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView
from .views import StockroomTokenObtainPairView, user_me, audit_log_list, admin_user_list_update

urlpatterns = [
    # Auth endpoints
    path('auth/login/', StockroomTokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('auth/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
    path('auth/me/', user_me, name='user-me'),

    # AuditLog endpoints
    path('audit-logs/', audit_log_list, name='audit-log-list'),

    # Admin user management
    path('admin/users/', admin_user_list_update, name='admin-user-list-update'),
]

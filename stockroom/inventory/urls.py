from django.urls import path
from .views import stock_list_update, stock_movement_list

urlpatterns = [
    path('stock/', stock_list_update, name='stock-list-update'),
    path('stock-movements/', stock_movement_list, name='stock-movement-list'),
]

from django.urls import path
from .views import product_list_create, product_detail, product_by_jan_code

urlpatterns = [
    path('products/', product_list_create, name='product-list-create'),
    path('products/<int:pk>/', product_detail, name='product-detail'),
    path('products/jan/<str:jan_code>/', product_by_jan_code, name='product-by-jan-code'),
]

import logging

from django.db import transaction
from django.db.models import Q
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from stockroom.core.errors import flatten_errors, not_found_response, validation_error_response
from stockroom.core.utils import create_audit_log
from stockroom.inventory.models import Stock
from .models import Product
from .serializers import ProductSerializer, ProductCreateSerializer

logger = logging.getLogger(__name__)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def product_list_create(request):
    """List products with their stock, or create a product"""
    if request.method == 'GET':
        queryset = Product.objects.select_related('stock')
        search = request.query_params.get('search')
        if search:
            queryset = queryset.filter(
                Q(name__icontains=search) |
                Q(product_code__icontains=search) |
                Q(jan_code__icontains=search)
            )
        serializer = ProductSerializer(queryset, many=True)
        return Response({'success': True, 'data': serializer.data, 'count': len(serializer.data)})

    serializer = ProductCreateSerializer(data=request.data)
    if not serializer.is_valid():
        return validation_error_response(flatten_errors(serializer.errors), 'Invalid product')

    initial_stock = serializer.validated_data.pop('initial_stock', None)
    with transaction.atomic():
        product = serializer.save()
        if initial_stock is not None:
            Stock.objects.create(product=product, quantity=initial_stock)

    logger.info(f"Product created: id={product.id}, jan_code={product.jan_code}, initial_stock={initial_stock}")
    create_audit_log(
        request=request,
        action='create',
        model_name='Product',
        object_id=product.id,
        object_reference=product.jan_code,
        changes={'name': product.name, 'initial_stock': initial_stock},
    )
    product = Product.objects.select_related('stock').get(pk=product.pk)
    return Response({'success': True, 'data': ProductSerializer(product).data}, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def product_detail(request, pk):
    """Retrieve, update or delete a product"""
    product = Product.objects.select_related('stock').filter(pk=pk).first()
    if product is None:
        return not_found_response('Product')

    if request.method == 'GET':
        return Response({'success': True, 'data': ProductSerializer(product).data})

    if request.method == 'DELETE':
        product_id = product.id
        product.delete()
        create_audit_log(request=request, action='delete', model_name='Product', object_id=product_id,
                         object_reference=product.jan_code)
        return Response(status=status.HTTP_204_NO_CONTENT)

    serializer = ProductSerializer(product, data=request.data, partial=request.method == 'PATCH')
    if not serializer.is_valid():
        return validation_error_response(flatten_errors(serializer.errors), 'Invalid product')
    serializer.save()
    create_audit_log(request=request, action='update', model_name='Product', object_id=product.id,
                     object_reference=product.jan_code, changes=dict(request.data))
    return Response({'success': True, 'data': serializer.data})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def product_by_jan_code(request, jan_code):
    """Look up a product by its scanned JAN code"""
    product = Product.objects.select_related('stock').filter(jan_code=jan_code.strip()).first()
    if product is None:
        return not_found_response('Product')
    return Response({'success': True, 'data': ProductSerializer(product).data})

from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from stockroom.catalog.models import Product
from stockroom.core.errors import error_response, not_found_response, validation_error_response
from stockroom.core.throttling import IdentityRateThrottle
from stockroom.core.utils import create_audit_log
from .exceptions import OrderValidationError, OrderWriteError
from .models import Order
from .serializers import OrderSerializer, OrderWithDetailsSerializer
from .services import place_order

ORDER_LIST_DEFAULT_LIMIT = 100
ORDER_LIST_MAX_LIMIT = 500


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
@throttle_classes([IdentityRateThrottle])
def order_list_create(request):
    """List orders newest first, or place a new order"""
    if request.method == 'GET':
        try:
            limit = int(request.query_params.get('limit', ORDER_LIST_DEFAULT_LIMIT))
        except ValueError:
            limit = ORDER_LIST_DEFAULT_LIMIT
        limit = max(1, min(limit, ORDER_LIST_MAX_LIMIT))
        serializer = OrderSerializer(Order.objects.all()[:limit], many=True)
        return Response({'success': True, 'data': serializer.data, 'count': len(serializer.data)})

    items = request.data.get('items') if isinstance(request.data, dict) else None
    try:
        placement = place_order(items, user=request.user)
    except OrderValidationError as e:
        return validation_error_response(e.details, 'Invalid order items')
    except OrderWriteError as e:
        if e.order_id is not None:
            create_audit_log(
                request=request,
                action='order_rollback',
                model_name='Order',
                object_id=e.order_id,
                changes={'error': str(e)},
            )
        return error_response(e, 'Failed to create order')

    create_audit_log(
        request=request,
        action='order_create',
        model_name='Order',
        object_id=placement.order_id,
        object_reference=f'Order #{placement.order_id}',
        changes={
            'item_count': placement.item_count,
            'total_quantity': placement.total_quantity,
            'total_excl_tax': str(placement.total_excl_tax),
            'total_incl_tax': str(placement.total_incl_tax),
        },
    )
    return Response({
        'success': True,
        'data': {
            'orderId': placement.order_id,
            'totalQuantity': placement.total_quantity,
            'totalExclTax': placement.total_excl_tax,
            'totalInclTax': placement.total_incl_tax,
            'itemCount': placement.item_count,
            'createdAt': placement.created_at,
        },
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def order_detail(request, pk):
    """Order with its lines and the products they refer to"""
    order = Order.objects.prefetch_related('details').filter(pk=pk).first()
    if order is None:
        return not_found_response('Order')

    product_ids = {detail.product_id for detail in order.details.all()}
    products = Product.objects.in_bulk(product_ids)
    serializer = OrderWithDetailsSerializer(order, context={'products': products})
    return Response({'success': True, 'data': serializer.data})

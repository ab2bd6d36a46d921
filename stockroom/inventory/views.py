from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from stockroom.core.errors import error_response, flatten_errors, not_found_response, validation_error_response
from stockroom.core.utils import create_audit_log
from .models import Stock, StockMovement
from .serializers import StockSerializer, StockUpdateSerializer, StockMovementSerializer
from .services import InvalidStockQuantity, StockNotFound, update_stock

MOVEMENT_LIST_DEFAULT_LIMIT = 100
MOVEMENT_LIST_MAX_LIMIT = 500


@api_view(['GET', 'PUT'])
@permission_classes([IsAuthenticated])
def stock_list_update(request):
    """List stock rows, or set/shift one product's quantity"""
    if request.method == 'GET':
        queryset = Stock.objects.select_related('product').order_by('product_id')
        product_id = request.query_params.get('product_id')
        if product_id:
            queryset = queryset.filter(product_id=product_id)
        serializer = StockSerializer(queryset, many=True)
        return Response({'success': True, 'data': serializer.data, 'count': len(serializer.data)})

    serializer = StockUpdateSerializer(data=request.data)
    if not serializer.is_valid():
        return validation_error_response(flatten_errors(serializer.errors), 'Invalid stock update')
    data = serializer.validated_data

    try:
        change = update_stock(
            product_id=data['productId'],
            quantity=data['quantity'],
            mode=data['mode'],
            user=request.user,
            reason=data.get('reason'),
        )
    except StockNotFound:
        return not_found_response('Stock record')
    except InvalidStockQuantity as e:
        return validation_error_response([str(e)], str(e))
    except Exception as e:
        return error_response(e, 'Failed to update stock')

    create_audit_log(
        request=request,
        action='stock_update',
        model_name='Stock',
        object_id=change.product_id,
        changes={
            'mode': data['mode'],
            'previous_quantity': change.previous_quantity,
            'new_quantity': change.new_quantity,
        },
    )
    return Response({
        'success': True,
        'data': {
            'productId': change.product_id,
            'previousQuantity': change.previous_quantity,
            'newQuantity': change.new_quantity,
            'updatedAt': change.updated_at,
        },
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def stock_movement_list(request):
    """Stock history, newest first"""
    queryset = StockMovement.objects.select_related('user')

    product_id = request.query_params.get('product_id')
    movement_type = request.query_params.get('movement_type')
    order_id = request.query_params.get('order_id')
    if product_id:
        queryset = queryset.filter(product_id=product_id)
    if movement_type:
        queryset = queryset.filter(movement_type=movement_type)
    if order_id:
        queryset = queryset.filter(order_id=order_id)

    try:
        limit = int(request.query_params.get('limit', MOVEMENT_LIST_DEFAULT_LIMIT))
    except ValueError:
        limit = MOVEMENT_LIST_DEFAULT_LIMIT
    limit = max(1, min(limit, MOVEMENT_LIST_MAX_LIMIT))

    serializer = StockMovementSerializer(queryset[:limit], many=True)
    return Response({'success': True, 'data': serializer.data, 'count': len(serializer.data)})

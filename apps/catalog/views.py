from django.db.models import Count
from rest_framework import viewsets, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.parsers import JSONParser, FormParser, MultiPartParser
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, extend_schema_view, OpenApiParameter

from apps.common.permissions import IsRewardsAdmin
from .models import RewardCategory, RewardProduct
from .serializers import (
    CategoryInputSerializer,
    ProductInputSerializer,
    ProductFilterSerializer,
    RewardCategorySerializer,
    RewardProductSerializer,
    CatalogSummarySerializer,
)
from .services import (
    create_category,
    rename_category,
    delete_category,
    create_product,
    update_product,
    delete_product,
    category_ids_by_name,
    get_catalog_counts,
)


@extend_schema(tags=['catalog'])
class RewardCategoryViewSet(viewsets.ModelViewSet):
    """
    ViewSet for reward categories.

    list: Get all categories with their product counts
    create: Create a category
    retrieve: Get a specific category
    update: Rename a category (optionally cascading to products)
    destroy: Delete a category no product uses
    """

    queryset = RewardCategory.objects.order_by('name')
    serializer_class = RewardCategorySerializer
    permission_classes = [IsRewardsAdmin]

    def get_serializer_context(self):
        context = super().get_serializer_context()
        rows = (
            RewardProduct.objects
            .order_by()
            .values('category_name')
            .annotate(total=Count('id'))
            .values_list('category_name', 'total')
        )
        context['product_counts'] = dict(rows)
        return context

    @extend_schema(request=CategoryInputSerializer, responses={201: RewardCategorySerializer})
    def create(self, request, *args, **kwargs):
        serializer = CategoryInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        category = create_category(name=serializer.validated_data['name'])

        output_serializer = self.get_serializer(category)
        return Response(output_serializer.data, status=status.HTTP_201_CREATED)

    @extend_schema(request=CategoryInputSerializer, responses=RewardCategorySerializer)
    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        category = self.get_object()

        serializer = CategoryInputSerializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        params = serializer.validated_data

        category = rename_category(
            category_id=category.id,
            name=params.get('name', category.name),
            cascade_to_products=params.get('cascade_to_products', False),
        )

        output_serializer = self.get_serializer(category)
        return Response(output_serializer.data)

    def destroy(self, request, *args, **kwargs):
        delete_category(category_id=self.kwargs['pk'])
        return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema_view(
    list=extend_schema(
        parameters=[
            OpenApiParameter('category', str, description='Exact category name'),
        ],
    ),
)
@extend_schema(tags=['catalog'])
class RewardProductViewSet(viewsets.ModelViewSet):
    """
    ViewSet for reward products.

    list: Get products, newest first (filterable by category name)
    create: Create a product (multipart when an image is attached)
    retrieve: Get a specific product
    update: Update a product, replacing its image when one is attached
    destroy: Delete a product and its image
    """

    queryset = RewardProduct.objects.order_by('-created_at')
    serializer_class = RewardProductSerializer
    permission_classes = [IsRewardsAdmin]
    parser_classes = [JSONParser, MultiPartParser, FormParser]

    def get_queryset(self):
        """Filter products using input serializer validation."""
        queryset = super().get_queryset()

        if self.action == 'list':
            filter_serializer = ProductFilterSerializer(data=self.request.query_params)
            filter_serializer.is_valid(raise_exception=True)
            category = filter_serializer.validated_data.get('category')
            if category:
                queryset = queryset.filter(category_name=category)

        return queryset

    def get_serializer_context(self):
        context = super().get_serializer_context()
        if self.action == 'list':
            context['category_ids'] = category_ids_by_name()
        return context

    @extend_schema(request=ProductInputSerializer, responses={201: RewardProductSerializer})
    def create(self, request, *args, **kwargs):
        serializer = ProductInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        params = serializer.validated_data

        product = create_product(
            name=params['name'],
            category_id=params['category_id'],
            price=params['price'],
            image=params.get('image'),
        )

        output_serializer = self.get_serializer(product)
        return Response(output_serializer.data, status=status.HTTP_201_CREATED)

    @extend_schema(request=ProductInputSerializer, responses=RewardProductSerializer)
    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        product = self.get_object()

        serializer = ProductInputSerializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        params = serializer.validated_data

        product = update_product(
            product_id=product.id,
            name=params.get('name', product.name),
            price=params.get('price', product.price),
            category_id=params.get('category_id'),
            image=params.get('image'),
        )

        output_serializer = self.get_serializer(product)
        return Response(output_serializer.data)

    def destroy(self, request, *args, **kwargs):
        delete_product(product_id=self.kwargs['pk'])
        return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema(tags=['catalog'], responses=CatalogSummarySerializer)
@api_view(['GET'])
@permission_classes([IsRewardsAdmin])
def catalog_summary(request):
    """Category and product counts for the admin tab badges."""
    serializer = CatalogSummarySerializer(get_catalog_counts())
    return Response(serializer.data)

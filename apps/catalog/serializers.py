from rest_framework import serializers
from .models import RewardCategory, RewardProduct
from .services import find_category_for_product, reward_image_url


# =============================================================================
# Input Serializers
# =============================================================================

class CategoryInputSerializer(serializers.Serializer):
    """Validate category create and rename payloads."""

    name = serializers.CharField(max_length=100)
    cascade_to_products = serializers.BooleanField(
        required=False,
        default=False,
        help_text='On rename, move products carrying the old name to the new one',
    )


class ProductInputSerializer(serializers.Serializer):
    """
    Validate product create and update payloads.

    Accepts JSON or multipart; ``image`` is only accepted as multipart.
    """

    name = serializers.CharField(max_length=200)
    category_id = serializers.UUIDField()
    price = serializers.IntegerField(min_value=0)
    image = serializers.ImageField(required=False)


class ProductFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for product listing.

    Query Parameters:
        category (str): Exact category name
    """

    category = serializers.CharField(max_length=100, required=False)


# =============================================================================
# Output Serializers
# =============================================================================

class RewardCategorySerializer(serializers.ModelSerializer):
    """Category with the number of products that reference it by name."""

    product_count = serializers.SerializerMethodField()

    class Meta:
        model = RewardCategory
        fields = ['id', 'name', 'product_count', 'created_at', 'updated_at']
        read_only_fields = fields

    def get_product_count(self, obj):
        counts = self.context.get('product_counts')
        if counts is not None:
            return counts.get(obj.name, 0)
        return RewardProduct.objects.filter(category_name=obj.name).count()


class RewardProductSerializer(serializers.ModelSerializer):
    """
    Product as shown to admins.

    ``category_id`` is the category currently carrying the product's category
    name, or null when that category was renamed or deleted.
    """

    category_id = serializers.SerializerMethodField()
    image_url = serializers.SerializerMethodField()

    class Meta:
        model = RewardProduct
        fields = [
            'id',
            'name',
            'category_name',
            'category_id',
            'price',
            'image',
            'image_url',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_category_id(self, obj):
        category_ids = self.context.get('category_ids')
        if category_ids is not None:
            category_id = category_ids.get(obj.category_name)
        else:
            category = find_category_for_product(obj)
            category_id = category.id if category else None
        return str(category_id) if category_id else None

    def get_image_url(self, obj):
        url = reward_image_url(obj.image)
        request = self.context.get('request')
        if url and request is not None:
            return request.build_absolute_uri(url)
        return url


class CatalogSummarySerializer(serializers.Serializer):
    categories = serializers.IntegerField()
    products = serializers.IntegerField()

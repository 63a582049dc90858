from django.db import models
import uuid


class RewardCategory(models.Model):
    """Named grouping for reward products."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100, db_index=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'reward_categories'
        ordering = ['name']
        verbose_name_plural = 'reward categories'

    def __str__(self):
        return self.name


class RewardProduct(models.Model):
    """
    Purchasable reward.

    ``category_name`` is a copy of the category's name taken when the product
    was last saved through the catalog service. Renaming a category does not
    touch it unless the rename is asked to cascade.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)
    category_name = models.CharField(max_length=100, db_index=True)
    price = models.PositiveIntegerField()

    # Storage object name; empty when the product has no image
    image = models.CharField(max_length=255, blank=True, default='')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'reward_products'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.name} ({self.price} pts)"

    @property
    def has_image(self):
        return bool(self.image)

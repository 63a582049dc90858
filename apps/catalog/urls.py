from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'catalog'

router = DefaultRouter()
router.register(r'categories', views.RewardCategoryViewSet, basename='category')
router.register(r'products', views.RewardProductViewSet, basename='product')

urlpatterns = [
    # GET    /api/catalog/summary/             - Category and product counts
    path('summary/', views.catalog_summary, name='summary'),

    # GET    /api/catalog/categories/          - List categories
    # POST   /api/catalog/categories/          - Create category
    # PUT    /api/catalog/categories/{id}/     - Rename category (cascade_to_products)
    # DELETE /api/catalog/categories/{id}/     - Delete unused category
    # GET    /api/catalog/products/            - List products (?category=)
    # POST   /api/catalog/products/            - Create product (multipart for image)
    # PUT    /api/catalog/products/{id}/       - Update product
    # DELETE /api/catalog/products/{id}/       - Delete product and image
    path('', include(router.urls)),
]

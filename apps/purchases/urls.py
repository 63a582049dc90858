from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'purchases'

router = DefaultRouter()
router.register(r'', views.RewardPurchaseViewSet, basename='purchase')

urlpatterns = [
    # GET    /api/purchases/                       - List purchases (?status=)
    # GET    /api/purchases/summary/               - Counts per status and owed refunds
    # GET    /api/purchases/{id}/                  - Get purchase
    # POST   /api/purchases/{id}/status/           - Set status (approved / rejected)
    # POST   /api/purchases/{id}/approve/          - Approve
    # POST   /api/purchases/{id}/reject/           - Reject and refund
    # POST   /api/purchases/{id}/settle_refund/    - Retry an owed refund
    path('', include(router.urls)),
]

from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'accounts'

router = DefaultRouter()
router.register(r'balances', views.UserAccountViewSet, basename='balance')

urlpatterns = [
    # GET    /api/accounts/balances/          - List balances (?user_id=, ?username=)
    # GET    /api/accounts/balances/{id}/     - Get balance record
    path('', include(router.urls)),
]

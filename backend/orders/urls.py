from django.urls import path

from . import views

app_name = "orders"

urlpatterns = [
    path("orders/intake-check/", views.OrderIntakeCheckView.as_view(), name="intake-check"),
    path("orders/<uuid:pk>/", views.OrderDetailView.as_view(), name="order-detail"),
    path("orders/<uuid:pk>/status/", views.OrderStatusUpdateView.as_view(), name="order-status"),
]

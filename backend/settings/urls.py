from django.urls import path

from . import views

app_name = "settings"

urlpatterns = [
    path("orders/", views.OrderSettingsView.as_view(), name="order-settings"),
]

from django.urls import path

from . import views

app_name = 'business_hours'

urlpatterns = [
    path('status/', views.BusinessHoursStatusView.as_view(), name='status'),
    path('schedule/', views.BusinessHoursScheduleView.as_view(), name='schedule'),
]

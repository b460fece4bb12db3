from django.urls import path
from . import views

app_name = 'payments'

urlpatterns = [
    path('checkout/', views.checkout, name='checkout'),
    path('webhook/', views.webhook, name='webhook'),
    path('downgrade/', views.downgrade, name='downgrade'),
    path('cancel-downgrade/', views.cancel_scheduled_downgrade, name='cancel-downgrade'),
    path('portal/', views.portal, name='portal'),
    path('receipts/', views.receipts, name='receipts'),
]

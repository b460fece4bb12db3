from django.urls import path
from . import views

app_name = 'messaging'

urlpatterns = [
    path('quota/', views.quota, name='quota'),
    path('credits/purchase/', views.credit_purchase, name='credit-purchase'),
    path('<uuid:match_id>/', views.conversation, name='conversation'),
]

from django.urls import path
from . import views

app_name = 'matches'

urlpatterns = [
    path('', views.list_matches, name='match-list'),
    path('like/', views.like, name='like'),
]

from django.urls import path
from . import views

app_name = 'users'

urlpatterns = [
    # Authentication
    path('register/', views.register, name='register'),
    path('login/', views.login, name='login'),
    path('magic-link/', views.magic_link_request, name='magic-link'),
    path('magic-link/verify/', views.magic_link_verify, name='magic-link-verify'),

    # Member profile
    path('me/', views.current_user, name='current-user'),

    # Membership tiers
    path('tiers/', views.list_tiers, name='tiers'),
]

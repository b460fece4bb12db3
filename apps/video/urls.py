from django.urls import path
from . import views

app_name = 'video'

urlpatterns = [
    path('room/create/', views.room_create, name='room-create'),
    path('calls/complete/', views.call_complete, name='call-complete'),
    path('sessions/past/', views.past_sessions, name='past-sessions'),
    path('sessions/<uuid:session_id>/', views.session_detail, name='session-detail'),
    path('sessions/<uuid:session_id>/extensions/', views.extension_create, name='extension-create'),
    path(
        'sessions/<uuid:session_id>/extensions/<uuid:extension_id>/',
        views.extension_respond,
        name='extension-respond'
    ),
    path(
        'sessions/<uuid:session_id>/extensions/<uuid:extension_id>/confirm/',
        views.extension_confirm,
        name='extension-confirm'
    ),
]

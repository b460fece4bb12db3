from django.urls import path
from . import views

app_name = 'safety'

urlpatterns = [
    # Member-facing
    path('blockers/', views.blockers, name='blockers'),
    path('safety-reports/', views.safety_reports, name='safety-reports'),

    # Moderation
    path('safety-reports/<uuid:report_id>/', views.review_safety_report, name='safety-report-review'),
    path('admin/flagged-users/', views.flagged_users, name='flagged-users'),
    path('admin/clear-flag/', views.clear_user_flag, name='clear-flag'),
]

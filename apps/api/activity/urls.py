# ===============================================================================
# ACTIVITY API URLS 📜
# ===============================================================================

from apps.api.core import optional_slash_path

from . import views

urlpatterns = [
    *optional_slash_path("activity/recent", views.recent_activity_api, name="activity-recent"),
    *optional_slash_path("dashboard/summary", views.dashboard_summary_api, name="dashboard-summary"),
]

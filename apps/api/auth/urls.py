"""
Authentication API URLs
"""

from apps.api.core import optional_slash_path

from . import views

urlpatterns = [
    *optional_slash_path("auth/login", views.login_api, name="login"),
    *optional_slash_path("auth/profile", views.profile_api, name="profile"),
    *optional_slash_path("auth/logout", views.logout_api, name="logout"),
]

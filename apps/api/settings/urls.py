# ===============================================================================
# SETTINGS API URLS ⚙️
# ===============================================================================

from apps.api.core import optional_slash_path

from . import views

urlpatterns = [
    *optional_slash_path("settings", views.settings_list_api, name="settings-list"),
    *optional_slash_path("settings/public", views.public_settings_api, name="settings-public"),
    *optional_slash_path("settings/structured", views.structured_settings_api, name="settings-structured"),
    *optional_slash_path("settings/category/<str:category>", views.category_settings_api, name="settings-category"),
    *optional_slash_path("settings/bulk", views.bulk_update_api, name="settings-bulk"),
    *optional_slash_path("settings/reset", views.reset_settings_api, name="settings-reset"),
    *optional_slash_path("settings/export", views.export_settings_api, name="settings-export"),
    *optional_slash_path("settings/import", views.import_settings_api, name="settings-import"),
    *optional_slash_path("settings/<str:key>/upload", views.upload_setting_file_api, name="settings-upload"),
    *optional_slash_path("settings/<str:key>", views.setting_detail_api, name="settings-detail"),
]

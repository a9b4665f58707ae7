# config/urls.py
from django.contrib import admin
from django.urls import path, include
from django.http import JsonResponse

from rest_framework import permissions
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView
from drf_yasg.views import get_schema_view
from drf_yasg import openapi


def api_root(request):
    return JsonResponse({"status": "ok"})


schema_view = get_schema_view(
    openapi.Info(
        title="Interview Workflow API",
        default_version="v1",
        description=(
            "Interview approval, feedback and notification API\n\n"
            "## Authentication\n"
            "Endpoints require JWT Bearer token authentication.\n\n"
            "### How to Authenticate:\n"
            "1. Call `POST /api/auth/token/` with email and password\n"
            "2. Copy the `access` token from the response\n"
            "3. Click the **Authorize** button above\n"
            "4. Enter: `Bearer <your_access_token>` (include 'Bearer ' prefix!)\n\n"
            "---\n\n"
            "## Errors\n"
            "Every error has the body `{error, status_code, message, details}`.\n"
            "Workflow actions answer 409 when the interview is not in a state that allows them.\n\n"
            "## Pagination\n"
            "Notification lists take `limit` (default 10, max 100) and `offset`.\n"
            "Interview lists take `page` and `page_size` (default 20, max 100)."
        ),
    ),
    public=True,
    permission_classes=(permissions.AllowAny,),
    # Schema endpoint must not require a token
    authentication_classes=[],
)

urlpatterns = [
    path("", api_root),
    path("admin/", admin.site.urls),
    # -----------------------------
    # AUTH API
    # -----------------------------
    path("api/auth/token/", TokenObtainPairView.as_view(), name="token_obtain_pair"),
    path("api/auth/token/refresh/", TokenRefreshView.as_view(), name="token_refresh"),
    # -----------------------------
    # INTERVIEW WORKFLOW APIs
    # -----------------------------
    path("api/interviews/", include("apps.interviews.urls")),
    # -----------------------------
    # NOTIFICATION SYSTEM APIs
    # -----------------------------
    path("api/notifications/", include("apps.notifications.urls")),
    # -----------------------------
    # DOCS
    # -----------------------------
    path("swagger/", schema_view.with_ui("swagger", cache_timeout=0)),
]

handler404 = "apps.common.utils.custom_404"
handler500 = "apps.common.utils.custom_500"
